"""Settings loader: packaged defaults, a TOML file, then the environment.

The resulting :class:`Settings` object is the only place API mode,
credentials and preferences come from. It is handed explicitly to the
resolver and generator; nothing in parsing or session logic reads it.
"""

from __future__ import annotations

import copy
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Mapping, MutableMapping, Optional

from dotenv import load_dotenv

from .core import config as core_config
from .core import workspace as workspace_mod
from .errors import SettingsError
from .quiz.models import ApiMode, Difficulty

CONFIG_FILENAME = "revisedlm.toml"
CONFIG_ENV = "REVISEDLM_CONFIG"
ENV_PREFIX = "REVISEDLM_"
OPENAI_KEY_ENV = "OPENAI_API_KEY"

_DEFAULTS: Mapping[str, Mapping[str, Any]] = {
    "api": {
        "mode": ApiMode.DEFAULT.value,
        "openai_key": "",
        "custom_endpoint": "",
        "custom_key": "",
        "custom_model": "",
    },
    "quiz": {
        "default_difficulty": int(Difficulty.BEGINNER),
        "quick_fire_timer": 30,
    },
    "preferences": {
        "debug_mode": False,
        "reduced_motion": False,
    },
    "logging": {"level": "INFO"},
}

# (section, key) filled from REVISEDLM_<NAME>
_ENV_KEYS = {
    "API_MODE": ("api", "mode"),
    "OPENAI_KEY": ("api", "openai_key"),
    "CUSTOM_ENDPOINT": ("api", "custom_endpoint"),
    "CUSTOM_KEY": ("api", "custom_key"),
    "CUSTOM_MODEL": ("api", "custom_model"),
    "DEFAULT_DIFFICULTY": ("quiz", "default_difficulty"),
    "QUICK_FIRE_TIMER": ("quiz", "quick_fire_timer"),
    "DEBUG": ("preferences", "debug_mode"),
    "REDUCED_MOTION": ("preferences", "reduced_motion"),
    "LOG_LEVEL": ("logging", "level"),
}

_TRUE = {"1", "true", "yes", "on"}
_FALSE = {"0", "false", "no", "off"}


@dataclass(frozen=True)
class Settings:
    """Resolved user settings."""

    api_mode: ApiMode = ApiMode.DEFAULT
    openai_key: str = ""
    custom_endpoint: str = ""
    custom_key: str = ""
    custom_model: str = ""
    default_difficulty: Difficulty = Difficulty.BEGINNER
    quick_fire_timer: int = 30
    debug_mode: bool = False
    reduced_motion: bool = False
    log_level: str = "INFO"


@dataclass(frozen=True)
class LoadResult:
    settings: Settings
    layout: workspace_mod.WorkspaceLayout
    config_path: Optional[Path]


def load_settings(
    *,
    config_path: Optional[Path] = None,
    env: Optional[Mapping[str, str]] = None,
    workspace_path: Optional[Path] = None,
) -> LoadResult:
    """Load settings with precedence environment > TOML file > defaults.

    When ``env`` is omitted a ``.env`` file is loaded into the process
    environment first. A file named explicitly (argument or
    ``REVISEDLM_CONFIG``) must exist; the workspace default may be absent.
    """

    if env is None:
        load_dotenv()
        env = os.environ

    layout = workspace_mod.ensure_workspace(env=env, path=workspace_path)
    requested = _resolve_config_path(
        config_path,
        env,
        default=layout.path_for("config") / CONFIG_FILENAME,
    )

    table: MutableMapping[str, Any] = copy.deepcopy(dict(_DEFAULTS))
    loaded_path: Optional[Path] = None
    if requested.exists():
        try:
            core_config.merge_defaults(table, core_config.load_toml(requested))
        except core_config.TomlConfigError as exc:
            raise SettingsError(str(exc)) from exc
        loaded_path = requested
    elif config_path is not None or (env.get(CONFIG_ENV) or "").strip():
        raise SettingsError(f"Settings file not found: {requested}")

    _apply_env(table, env)
    return LoadResult(
        settings=_build_settings(table),
        layout=layout,
        config_path=loaded_path,
    )


def _resolve_config_path(
    explicit: Optional[Path], env: Mapping[str, str], *, default: Path
) -> Path:
    if explicit is not None:
        return explicit.expanduser()
    candidate = (env.get(CONFIG_ENV) or "").strip()
    if candidate:
        return Path(candidate).expanduser()
    return default


def _apply_env(table: MutableMapping[str, Any], env: Mapping[str, str]) -> None:
    for name, (section, key) in _ENV_KEYS.items():
        raw = env.get(f"{ENV_PREFIX}{name}")
        if raw is None or not raw.strip():
            continue
        table[section][key] = raw.strip()
    if not str(table["api"]["openai_key"]).strip():
        fallback = (env.get(OPENAI_KEY_ENV) or "").strip()
        if fallback:
            table["api"]["openai_key"] = fallback


def _build_settings(table: Mapping[str, Mapping[str, Any]]) -> Settings:
    api = table["api"]
    quiz = table["quiz"]
    prefs = table["preferences"]
    try:
        mode = ApiMode.from_value(_require_string(api["mode"], "api.mode"))
        difficulty = Difficulty.from_value(quiz["default_difficulty"])
    except ValueError as exc:
        raise SettingsError(str(exc)) from exc
    return Settings(
        api_mode=mode,
        openai_key=_require_string(api["openai_key"], "api.openai_key"),
        custom_endpoint=_require_string(
            api["custom_endpoint"], "api.custom_endpoint"
        ),
        custom_key=_require_string(api["custom_key"], "api.custom_key"),
        custom_model=_require_string(api["custom_model"], "api.custom_model"),
        default_difficulty=difficulty,
        quick_fire_timer=_require_positive_int(
            quiz["quick_fire_timer"], "quiz.quick_fire_timer"
        ),
        debug_mode=_require_bool(prefs["debug_mode"], "preferences.debug_mode"),
        reduced_motion=_require_bool(
            prefs["reduced_motion"], "preferences.reduced_motion"
        ),
        log_level=_require_string(
            table["logging"]["level"], "logging.level"
        ).upper()
        or "INFO",
    )


def _require_string(value: Any, field: str) -> str:
    if not isinstance(value, str):
        raise SettingsError(f"'{field}' must be a string.")
    return value.strip()


def _require_positive_int(value: Any, field: str) -> int:
    if isinstance(value, str):
        try:
            value = int(value)
        except ValueError as exc:
            raise SettingsError(f"'{field}' must be a positive integer.") from exc
    if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
        raise SettingsError(f"'{field}' must be a positive integer.")
    return value


def _require_bool(value: Any, field: str) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in _TRUE:
            return True
        if lowered in _FALSE:
            return False
    raise SettingsError(f"'{field}' must be a boolean.")
