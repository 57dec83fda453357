import logging
import os
from typing import Any

logger = logging.getLogger(__name__)

TRUE_VALUES = ("true", "1", "yes")


def get_env_var(var_name: str, default: Any = None) -> Any:
    """
    Get an environment variable, with an optional default.

    Args:
        var_name: Name of the environment variable
        default: Value returned when the variable is not set

    Returns:
        The variable's value or the default
    """
    return os.environ.get(var_name, default)


def get_env_str(var_name: str, default: str = "") -> str:
    return str(get_env_var(var_name, default))


def get_env_int(var_name: str, default: int = 0) -> int:
    """
    Get an integer environment variable.

    Unparsable values fall back to the default and are logged.
    """
    raw = get_env_var(var_name)
    if raw is None or raw == "":
        return default
    try:
        return int(raw)
    except ValueError:
        logger.warning(f"Invalid integer for {var_name}: {raw!r}, using {default}")
        return default


def get_env_float(var_name: str, default: float = 0.0) -> float:
    """
    Get a float environment variable.

    Unparsable values fall back to the default and are logged.
    """
    raw = get_env_var(var_name)
    if raw is None or raw == "":
        return default
    try:
        return float(raw)
    except ValueError:
        logger.warning(f"Invalid number for {var_name}: {raw!r}, using {default}")
        return default


def get_env_bool(var_name: str, default: bool = False) -> bool:
    raw = get_env_var(var_name)
    if raw is None:
        return default
    return str(raw).lower() in TRUE_VALUES


def get_debug_mode() -> bool:
    """
    Check whether debug mode is enabled.

    Returns:
        bool: True when the DEBUG variable is set to a truthy value
    """
    return get_env_bool("DEBUG", False)
