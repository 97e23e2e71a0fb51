from __future__ import annotations
import os
from typing import List, Mapping, Optional


class cfg:
    """Timing and layout tunables for driving the editor."""

    # --- Bounded waits ---
    ELEMENT_WAIT_S = 10.0
    POLL_INTERVAL_S = 0.1

    # --- Settle pauses after UI transitions ---
    FLYOUT_SETTLE_S = 0.1  # category click -> flyout rendered
    MENU_SETTLE_S = 0.1  # menu item click -> action applied
    RTL_SETTLE_S = 0.5
    GESTURE_SETTLE_S = 0.05

    # --- Flyout slot layout: n-th block sits at child 3 + 2n ---
    FLYOUT_FIRST_BLOCK_SLOT = 3
    FLYOUT_SLOT_STRIDE = 2

    # --- Drag synthesis ---
    DRAG_STEPS = 12
    DRAG_STEP_INTERVAL_S = 0.01
    DRAG_HOLD_S = 0.01  # after press, before first move
    EASE_POWER = 2.0
    CLICK_DOWN_UP_DELAY_S = 0.03

    # --- CDP dispatch ---
    CDP_SEND_TIMEOUT_S = 5.0
    CDP_SEND_MIN_INTERVAL_S = 0.005

    # --- Trajectory rendering ---
    MIN_SPEED_PX_PER_MS = 0.05
    MAX_SPEED_PX_PER_MS = 2.0


EDITOR_ROOT_ENV = "BLOCKDRIVER_EDITOR_ROOT"

# Always needed: target documents are opened from file:// URLs.
BASE_CHROME_ARGS = ["--allow-file-access-from-files"]
CI_CHROME_ARGS = ["--disable-dev-shm-usage"]
# Keeps Chrome from hanging on Linux with old NVIDIA drivers.
DESKTOP_CHROME_ARGS = ["--disable-gpu"]


def is_ci(environ: Optional[Mapping[str, str]] = None) -> bool:
    """Return True when running under a CI runner (``CI`` set and truthy)."""
    env = os.environ if environ is None else environ
    value = env.get("CI", "").strip().lower()
    return value not in ("", "0", "false", "no")


def chrome_arguments(environ: Optional[Mapping[str, str]] = None) -> List[str]:
    """Extra Chrome switches for this environment.

    Headless mode and the sandbox switch are not listed here; zendriver adds
    them itself from ``zendriver.start(headless=..., sandbox=...)``.
    """
    args = list(BASE_CHROME_ARGS)
    if is_ci(environ):
        args.extend(CI_CHROME_ARGS)
    else:
        args.extend(DESKTOP_CHROME_ARGS)
    return args


def editor_root(environ: Optional[Mapping[str, str]] = None) -> str:
    """Directory of the editor checkout whose documents are driven."""
    env = os.environ if environ is None else environ
    return env.get(EDITOR_ROOT_ENV) or os.getcwd()
