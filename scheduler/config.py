import os
from dotenv import load_dotenv

from .errors import ConfigError

load_dotenv()

EMPTY_TASK_POLICIES = ("zero", "error")
DUPLICATE_NAME_POLICIES = ("suffix", "reject")


def _read_choice(var: str, default: str, choices: tuple[str, ...]) -> str:
    value = os.environ.get(var, "").strip().lower() or default
    if value not in choices:
        raise ConfigError(
            f"{var}={value!r} is not supported; expected one of {list(choices)}",
            details={"variable": var, "value": value},
        )
    return value


def get_log_level() -> str:
    """Return the log level name for entry points (default INFO)."""
    return os.environ.get("SCHEDULER_LOG_LEVEL", "").strip().upper() or "INFO"


def get_empty_task_policy() -> str:
    """
    Return how a batch on an empty task set is handled.

    - 'zero': every rule yields no rows and all-zero metrics
    - 'error': the batch raises EmptyTaskSetError

    Raises:
        ConfigError: if SCHEDULER_EMPTY_TASK_POLICY holds another value.
    """
    return _read_choice("SCHEDULER_EMPTY_TASK_POLICY", "zero", EMPTY_TASK_POLICIES)


def get_duplicate_name_policy() -> str:
    """
    Return how the repository resolves a name collision.

    - 'suffix': append -2, -3, ... until the name is unique
    - 'reject': raise ValidationError

    Raises:
        ConfigError: if SCHEDULER_DUPLICATE_NAME_POLICY holds another value.
    """
    return _read_choice(
        "SCHEDULER_DUPLICATE_NAME_POLICY", "suffix", DUPLICATE_NAME_POLICIES
    )


def get_default_objective() -> str:
    """Return the objective used when a caller does not name one."""
    return os.environ.get("SCHEDULER_DEFAULT_OBJECTIVE", "").strip() or "Cmax"


def get_cors_origins() -> list[str]:
    """Return allowed CORS origins for the HTTP adapter."""
    origins_env = os.getenv("BACKEND_CORS_ORIGINS")
    if origins_env:
        return [o.strip() for o in origins_env.split(",") if o.strip()]
    return ["*"]
