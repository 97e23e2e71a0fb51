from setuptools import setup
from pathlib import Path

this_directory = Path(__file__).parent
long_description = (this_directory / "README.md").read_text(encoding="utf-8")

setup(
    name="blockdriver",
    version="0.1.0",
    description="Drive a Blockly-style block editor in Chrome for functional tests",
    long_description=long_description,
    long_description_content_type="text/markdown",
    packages=["blockdriver", "blockdriver.gestures"],
    install_requires=[
        "zendriver",
        "Pillow",
    ],
    extras_require={
        "test": [
            "pytest",
            "pytest-asyncio",
        ],
    },
    classifiers=[
        "Programming Language :: Python :: 3",
        "Operating System :: OS Independent",
    ],
    python_requires=">=3.9",
)
