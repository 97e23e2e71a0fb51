"""Tests for launch configuration and environment detection."""

import pytest

from blockdriver.config import chrome_arguments, editor_root, is_ci


class TestIsCI:
    """Tests for is_ci."""

    @pytest.mark.parametrize("value", ["true", "1", "yes", "True"])
    def test_truthy_values(self, value):
        """is_ci accepts the usual truthy spellings."""
        assert is_ci({"CI": value}) is True

    @pytest.mark.parametrize("value", ["", "0", "false", "no", "FALSE", " No "])
    def test_falsy_values(self, value):
        """is_ci treats empty and false-like values as not CI."""
        assert is_ci({"CI": value}) is False

    def test_missing(self):
        assert is_ci({}) is False


class TestChromeArguments:
    """Tests for chrome_arguments."""

    def test_always_allows_file_access(self):
        """File access from file:// documents is needed in every environment."""
        assert "--allow-file-access-from-files" in chrome_arguments({})
        assert "--allow-file-access-from-files" in chrome_arguments({"CI": "true"})

    def test_ci_flags(self):
        args = chrome_arguments({"CI": "true"})
        assert "--disable-dev-shm-usage" in args
        assert "--disable-gpu" not in args

    def test_desktop_flags(self):
        args = chrome_arguments({})
        assert "--disable-gpu" in args
        assert "--disable-dev-shm-usage" not in args


class TestEditorRoot:
    def test_from_environment(self):
        assert editor_root({"BLOCKDRIVER_EDITOR_ROOT": "/src/blockly"}) == "/src/blockly"

    def test_defaults_to_cwd(self, monkeypatch, tmp_path):
        monkeypatch.chdir(tmp_path)
        assert editor_root({}) == str(tmp_path)
