import os
import logging
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

loaded = load_dotenv()
if not loaded and Path(".env").exists():
    raise RuntimeError(".env file present but failed to load")

logger = logging.getLogger(__name__)

DEFAULT_USER_AGENT = "Mozilla/5.0 (compatible; politecrawl/0.1)"
DEFAULT_ROBOT_USER_AGENT = "politecrawl"
DEFAULT_CRAWL_DELAY = 5.0
DEFAULT_WORKER_IDLE_TTL = 10.0
DEFAULT_HTTP_TIMEOUT = 10

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off"}


def get_str_env(name: str, default: str) -> str:
    raw = os.getenv(name)
    if raw is None or raw == "":
        return default
    return raw


def get_optional_str_env(name: str) -> Optional[str]:
    raw = os.getenv(name)
    if raw is None or raw == "":
        return None
    return raw


def get_int_env(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw == "":
        return default
    try:
        return int(raw)
    except ValueError:
        logger.exception("Invalid %s: %r", name, raw)
        return default


def get_optional_int_env(name: str) -> Optional[int]:
    raw = os.getenv(name)
    if raw is None or raw == "":
        return None
    try:
        return int(raw)
    except ValueError:
        logger.exception("Invalid %s: %r", name, raw)
        return None


def get_float_env(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or raw == "":
        return default
    try:
        return float(raw)
    except ValueError:
        logger.exception("Invalid %s: %r", name, raw)
        return default


def get_bool_env(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None or raw == "":
        return default
    value = raw.strip().lower()
    if value in _TRUE_VALUES:
        return True
    if value in _FALSE_VALUES:
        return False
    logger.error("Invalid %s: %r", name, raw)
    return default


def user_agent() -> str:
    return get_str_env("POLITECRAWL_USER_AGENT", DEFAULT_USER_AGENT)


def robot_user_agent() -> str:
    return get_str_env("POLITECRAWL_ROBOT_USER_AGENT", DEFAULT_ROBOT_USER_AGENT)


def crawl_delay() -> float:
    return get_float_env("POLITECRAWL_CRAWL_DELAY", DEFAULT_CRAWL_DELAY)


def max_visits() -> int:
    return get_int_env("POLITECRAWL_MAX_VISITS", 0)


def worker_idle_ttl() -> float:
    return get_float_env("POLITECRAWL_WORKER_IDLE_TTL", DEFAULT_WORKER_IDLE_TTL)


def same_host_only() -> bool:
    return get_bool_env("POLITECRAWL_SAME_HOST_ONLY", True)


def head_before_get() -> bool:
    return get_bool_env("POLITECRAWL_HEAD_BEFORE_GET", False)


def http_timeout() -> int:
    return get_int_env("POLITECRAWL_HTTP_TIMEOUT", DEFAULT_HTTP_TIMEOUT)


def log_flags() -> Optional[str]:
    return get_optional_str_env("POLITECRAWL_LOG_FLAGS")
