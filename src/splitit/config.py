"""Runtime settings read from the environment."""

import os
from pathlib import Path

DEFAULT_STATE_DIR = Path.home() / ".splitit"
DEFAULT_CURRENCY_SYMBOL = "₹"


def get_state_dir(override: str | Path | None = None) -> Path:
    """Get the state directory, respecting SPLITIT_STATE_DIR env var."""
    if override is not None:
        return Path(override)
    env_path = os.environ.get("SPLITIT_STATE_DIR")
    if env_path:
        return Path(env_path)
    return DEFAULT_STATE_DIR


def get_currency_symbol() -> str:
    """Get the display currency symbol, respecting SPLITIT_CURRENCY_SYMBOL."""
    return os.environ.get("SPLITIT_CURRENCY_SYMBOL") or DEFAULT_CURRENCY_SYMBOL
