"""Client configuration loaded from YAML or the environment."""

from __future__ import annotations

import os
from collections.abc import Mapping
from pathlib import Path
from typing import Any

from omegaconf import OmegaConf
from pydantic import BaseModel, ConfigDict, Field

from .errors import MissingCredentialError

DEFAULT_CONFIG_LOCATION = "conf/crunchbase.yml"

# Upper-case config keys mapped to settings fields.
_KEY_MAP: dict[str, str] = {
    "CRUNCHBASE_USER_KEY": "user_key",
    "CRUNCHBASE_BASE_URL": "base_url",
    "CRUNCHBASE_API_VERSION": "api_version",
    "CRUNCHBASE_TIMEOUT": "timeout_limit",
    "CRUNCHBASE_REDIRECT_LIMIT": "redirect_limit",
    "CRUNCHBASE_DEBUG": "debug",
    "CRUNCHBASE_MAX_RELATIONSHIP_DEPTH": "max_relationship_depth",
}


def _repo_root() -> Path:
    return Path(__file__).resolve().parents[2]


def _candidate_paths(raw: Path) -> tuple[Path, ...]:
    if raw.is_absolute():
        return (raw,)
    return (Path.cwd() / raw, _repo_root() / raw)


def _existing_unique_paths(candidates: tuple[Path, ...]) -> tuple[Path, ...]:
    existing: list[Path] = []
    seen: set[Path] = set()
    for candidate in candidates:
        if not candidate.exists():
            continue
        resolved = candidate.resolve()
        if resolved in seen:
            continue
        seen.add(resolved)
        existing.append(resolved)
    return tuple(existing)


def _resolve_config_location(spec: Path | str, *, source: str) -> Path:
    raw = Path(spec).expanduser()
    candidates = _candidate_paths(raw)
    existing = _existing_unique_paths(candidates)
    if len(existing) == 1:
        return existing[0]
    if not existing:
        checked = "\n".join(str(candidate) for candidate in candidates)
        raise FileNotFoundError(f"Config file not found for {source}: {raw}\nChecked:\n{checked}")
    joined = ", ".join(str(path) for path in existing)
    raise RuntimeError(f"Multiple config files found for {source}: {raw}. Candidates: {joined}")


def _settings_kwargs(normalized: Mapping[str, Any]) -> dict[str, Any]:
    kwargs: dict[str, Any] = {}
    for key, field_name in _KEY_MAP.items():
        value = normalized.get(key)
        if value is None or value == "":
            continue
        kwargs[field_name] = value
    return kwargs


class ClientSettings(BaseModel):
    """Process-wide client configuration, read-only once constructed."""

    model_config = ConfigDict(frozen=True)

    user_key: str | None = Field(
        default=None,
        description="Crunchbase user key appended to every request as `user_key`",
    )
    base_url: str = Field(
        default="https://api.crunchbase.com",
        description="API host, without version segment",
    )
    api_version: str = Field(default="3.1", description="API version, e.g. '3.1'")
    timeout_limit: float = Field(
        default=60, gt=0, description="Overall deadline in seconds for one fetch"
    )
    redirect_limit: int = Field(
        default=2, ge=0, description="Maximum number of requests spent following redirects"
    )
    debug: bool = Field(default=False, description="Log every URI visited")
    max_relationship_depth: int = Field(
        default=8, ge=1, description="Deepest nesting of embedded relationships to resolve"
    )

    @property
    def api_url(self) -> str:
        return f"{self.base_url.rstrip('/')}/v{self.api_version}/"

    def require_user_key(self) -> str:
        if not self.user_key:
            raise MissingCredentialError()
        return self.user_key

    @classmethod
    def from_mapping(cls, values: Mapping[str, Any]) -> ClientSettings:
        normalized = {str(key).upper(): value for key, value in values.items()}
        return cls(**_settings_kwargs(normalized))

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> ClientSettings:
        """Create settings from ``CRUNCHBASE_*`` environment variables."""
        return cls.from_mapping(os.environ if environ is None else environ)

    @classmethod
    def from_file(cls, path: Path | str | None = None) -> ClientSettings:
        """Create settings from a YAML file, ``conf/crunchbase.yml`` by default.

        ``CRUNCHBASE_CONFIG_PATH`` takes precedence over ``path``.
        """
        env_path = os.environ.get("CRUNCHBASE_CONFIG_PATH")
        if env_path:
            location = _resolve_config_location(env_path, source="CRUNCHBASE_CONFIG_PATH")
        elif path is not None:
            location = _resolve_config_location(path, source="path")
        else:
            location = _resolve_config_location(DEFAULT_CONFIG_LOCATION, source="default")

        config = OmegaConf.to_container(OmegaConf.load(location), resolve=True)
        if not isinstance(config, dict):
            raise ValueError("Config file must contain a mapping of setting keys.")
        return cls.from_mapping(config)
