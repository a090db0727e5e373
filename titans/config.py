import logging
import os

import streamlit as st

DEFAULT_CLUB_NAME = "Titans Lacrosse"
DEFAULT_SEASON = "2025-26"

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def _read_secrets(name: str) -> str:
    try:
        return str(st.secrets.get(name, "") or "")
    except FileNotFoundError:
        # No secrets.toml (tests, bare `python -c`); fall through to the environment.
        return ""


def get_optional(name: str, default: str = "") -> str:
    """Read a setting from Streamlit secrets, then the environment. Never raises."""
    val = _read_secrets(name)
    if not val:
        val = os.getenv(name, "")
    return val or default


def get_secret(name: str) -> str:
    val = get_optional(name)
    if not val:
        raise RuntimeError(f"Missing Streamlit secret: {name}")
    return str(val)


def club_name() -> str:
    return get_optional("CLUB_NAME", DEFAULT_CLUB_NAME)


def current_season() -> str:
    return get_optional("SEASON", DEFAULT_SEASON)


def configure_logging() -> None:
    # Log level comes from LOG_LEVEL (default INFO); basicConfig is a no-op after the first rerun.
    log_level = get_optional("LOG_LEVEL", "INFO").upper()
    numeric_level = getattr(logging, log_level, logging.INFO)
    logging.basicConfig(level=numeric_level, format=LOG_FORMAT)
