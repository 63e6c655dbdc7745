"""Configuration loading for docagent (environment plus optional YAML file)."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Sequence

import yaml


class ConfigError(RuntimeError):
    """Raised when required settings are missing or malformed."""


CONFIG_ENV_VAR = "DOCAGENT_CONFIG"
LOG_FILE_ENV_VAR = "DOCAGENT_LOG_FILE"

_REQUIRED_ENV = {
    "app_id": "GITHUB_APP_ID",
    "private_key": "GITHUB_PRIVATE_KEY",
    "webhook_secret": "GITHUB_WEBHOOK_SECRET",
    "llm_api_key": "OPENAI_API_KEY",
}


@dataclass
class Settings:
    """Runtime settings for the webhook service and processing runs."""

    app_id: str
    private_key: str
    webhook_secret: str
    llm_api_key: str
    llm_model: str = "gpt-4.1-mini"
    llm_base_url: str = "https://api.openai.com/v1"
    llm_timeout_ms: int = 120_000
    llm_temperature: float = 0.2
    port: int = 3000
    commit_actor: str = "doc-agent-github-app"
    max_concurrent_file_reads: int = 8
    github_api_url: str = "https://api.github.com"
    max_files: int = 80
    max_file_chars: int = 9000
    exclude_paths: List[str] = field(default_factory=list)
    log_file: Optional[str] = None


def load_settings(
    environ: Mapping[str, str] | None = None,
    config_path: Path | str | None = None,
) -> Settings:
    """Build settings from the environment, layered over an optional YAML file."""
    env = os.environ if environ is None else environ

    path_value = config_path or env.get(CONFIG_ENV_VAR)
    data = _read_config(Path(path_value)) if path_value else {}

    missing = [name for name in _REQUIRED_ENV.values() if not env.get(name)]
    if missing:
        raise ConfigError(f"Missing required environment variable: {', '.join(missing)}")

    llm_data = _as_dict(data.get("llm"))
    snapshot_data = _as_dict(data.get("snapshot"))
    defaults = Settings(app_id="", private_key="", webhook_secret="", llm_api_key="")

    exclude_paths = _as_str_list(snapshot_data.get("exclude_paths")) or list(defaults.exclude_paths)

    return Settings(
        app_id=env["GITHUB_APP_ID"],
        private_key=env["GITHUB_PRIVATE_KEY"].replace("\\n", "\n"),
        webhook_secret=env["GITHUB_WEBHOOK_SECRET"],
        llm_api_key=env["OPENAI_API_KEY"],
        llm_model=_first(env.get("OPENAI_MODEL"), _as_str(llm_data.get("model")), defaults.llm_model),
        llm_base_url=_first(
            env.get("OPENAI_BASE_URL"), _as_str(llm_data.get("base_url")), defaults.llm_base_url
        ).rstrip("/"),
        llm_timeout_ms=_int_setting(
            "OPENAI_TIMEOUT_MS", env.get("OPENAI_TIMEOUT_MS"), llm_data.get("timeout_ms"), defaults.llm_timeout_ms
        ),
        llm_temperature=_float_setting(
            "llm.temperature", llm_data.get("temperature"), defaults.llm_temperature
        ),
        port=_int_setting("PORT", env.get("PORT"), data.get("port"), defaults.port),
        commit_actor=_first(
            env.get("COMMIT_ACTOR"), _as_str(data.get("commit_actor")), defaults.commit_actor
        ),
        max_concurrent_file_reads=_int_setting(
            "MAX_CONCURRENT_FILE_READS",
            env.get("MAX_CONCURRENT_FILE_READS"),
            data.get("max_concurrent_file_reads"),
            defaults.max_concurrent_file_reads,
        ),
        github_api_url=_first(env.get("GITHUB_API_URL"), defaults.github_api_url).rstrip("/"),
        max_files=_int_setting("snapshot.max_files", None, snapshot_data.get("max_files"), defaults.max_files),
        max_file_chars=_int_setting(
            "snapshot.max_file_chars", None, snapshot_data.get("max_file_chars"), defaults.max_file_chars
        ),
        exclude_paths=exclude_paths,
        log_file=_first(env.get(LOG_FILE_ENV_VAR), _as_str(data.get("log_file"))) or None,
    )


def _read_config(config_file: Path) -> Dict[str, Any]:
    config_file = config_file.expanduser()
    if not config_file.exists():
        raise ConfigError(f"Config file not found: {config_file}")
    try:
        data = yaml.safe_load(config_file.read_text(encoding="utf-8"))
    except yaml.YAMLError as exc:
        raise ConfigError(f"Failed to parse {config_file}: {exc}") from exc
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(f"{config_file.name} must contain a mapping at the root")
    return data


def _first(*values: Optional[str]) -> str:
    for value in values:
        if value:
            return value
    return ""


def _int_setting(name: str, env_value: Optional[str], file_value: Any, default: int) -> int:
    for candidate in (env_value, file_value):
        if candidate is None or candidate == "":
            continue
        parsed = _as_int(candidate)
        if parsed is None:
            raise ConfigError(f"{name} must be an integer, got {candidate!r}")
        return parsed
    return default


def _float_setting(name: str, value: Any, default: float) -> float:
    if value is None:
        return default
    parsed = _as_float(value)
    if parsed is None:
        raise ConfigError(f"{name} must be a number, got {value!r}")
    return parsed


def _as_dict(value: Any) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _as_str(value: Any) -> Optional[str]:
    return str(value) if isinstance(value, (str, int, float)) and not isinstance(value, bool) else None


def _as_float(value: Any) -> Optional[float]:
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return float(value)
    if isinstance(value, str):
        try:
            return float(value)
        except ValueError:
            return None
    return None


def _as_int(value: Any) -> Optional[int]:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        try:
            return int(value.strip())
        except ValueError:
            return None
    return None


def _as_str_list(value: Any) -> List[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    if isinstance(value, Sequence):
        return [str(item) for item in value if isinstance(item, (str, int, float))]
    return []
