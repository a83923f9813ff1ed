"""Environment-driven settings for feedcheck sessions.

Each builder reads FEEDCHECK_* variables and returns plain values or a
kwargs dict ready to pass to Playwright. CLI options override these.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Optional

from feedcheck.models import Engine

_FALSE_VALUES = ("0", "false", "no", "off")

# Extra Chromium flags that keep headless runs stable inside containers.
_CHROMIUM_ARGS = ("--disable-dev-shm-usage",)


def default_engine() -> Engine:
    """Engine from FEEDCHECK_ENGINE, falling back to chromium."""
    value = os.environ.get("FEEDCHECK_ENGINE", Engine.CHROMIUM.value)
    try:
        return Engine(value)
    except ValueError:
        return Engine.CHROMIUM


def headless_default() -> bool:
    """FEEDCHECK_HEADLESS, on unless set to 0/false/no/off."""
    return os.environ.get("FEEDCHECK_HEADLESS", "1").strip().lower() not in _FALSE_VALUES


def slow_mo_default() -> int:
    """FEEDCHECK_SLOW_MO in milliseconds, 0 when unset or invalid."""
    try:
        return max(0, int(os.environ.get("FEEDCHECK_SLOW_MO", "0")))
    except ValueError:
        return 0


def navigation_timeout_ms() -> int:
    """FEEDCHECK_NAV_TIMEOUT_MS, default 30s."""
    try:
        return int(os.environ.get("FEEDCHECK_NAV_TIMEOUT_MS", "30000"))
    except ValueError:
        return 30000


def http_delay_s() -> float:
    """Pause between page requests for the http engine (FEEDCHECK_HTTP_DELAY)."""
    try:
        return max(0.0, float(os.environ.get("FEEDCHECK_HTTP_DELAY", "1.0")))
    except ValueError:
        return 1.0


def results_root() -> Path:
    """Where runs are stored. FEEDCHECK_RESULTS_DIR or feedcheck/results/."""
    override = os.environ.get("FEEDCHECK_RESULTS_DIR")
    if override:
        return Path(override)
    return Path(__file__).parent / "results"


def build_launch_options(
    engine: Engine,
    headless: Optional[bool] = None,
    slow_mo: Optional[int] = None,
) -> dict:
    """Build Playwright launch kwargs for a browser engine.

    Args:
        engine: One of the browser engines. HTTP has no browser to launch.
        headless: Run without a window. Defaults to FEEDCHECK_HEADLESS.
        slow_mo: Delay in ms between Playwright operations, for watching a
            headed run. Defaults to FEEDCHECK_SLOW_MO.

    Raises:
        ValueError: If engine is Engine.HTTP.
    """
    if engine == Engine.HTTP:
        raise ValueError("the http engine does not launch a browser")

    opts: dict = {
        "headless": headless_default() if headless is None else headless,
    }
    delay = slow_mo_default() if slow_mo is None else slow_mo
    if delay > 0:
        opts["slow_mo"] = delay
    if engine == Engine.CHROMIUM:
        opts["args"] = list(_CHROMIUM_ARGS)
    return opts
