import os
from dataclasses import dataclass

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off", ""}


def _env_choice(name: str, default: str, choices: tuple[str, ...]) -> str:
    value = os.environ.get(name, default).strip().lower()
    if value not in choices:
        allowed = ", ".join(choices)
        raise RuntimeError(f"{name} must be one of: {allowed}")
    return value


def _env_bool(name: str, default: str) -> bool:
    value = os.environ.get(name, default).strip().lower()
    if value in _TRUE_VALUES:
        return True
    if value in _FALSE_VALUES:
        return False
    raise RuntimeError(f"{name} must be a boolean flag")


@dataclass(frozen=True)
class Config:
    log_format: str = "json"
    log_level: str = "INFO"
    case_insensitive_grouping: bool = False
    default_time_direction: str = "higher"
    muscle_share_basis: str = "exercises"

    @classmethod
    def from_env(cls) -> "Config":
        return cls(
            log_format=_env_choice("INSIGHTS_LOG_FORMAT", "json", ("json", "text")),
            log_level=_env_choice(
                "INSIGHTS_LOG_LEVEL",
                "info",
                ("debug", "info", "warning", "error"),
            ).upper(),
            case_insensitive_grouping=_env_bool("INSIGHTS_CASE_INSENSITIVE_GROUPING", "false"),
            default_time_direction=_env_choice(
                "INSIGHTS_TIME_DIRECTION", "higher", ("higher", "lower")
            ),
            muscle_share_basis=_env_choice(
                "INSIGHTS_MUSCLE_SHARE_BASIS", "exercises", ("exercises", "entries")
            ),
        )
