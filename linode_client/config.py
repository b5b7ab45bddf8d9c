"""Frozen dataclasses for configuration and YAML loader with env-var interpolation."""

from __future__ import annotations

import os
import re
import types
import typing
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from .exceptions import ConfigError

# ${NAME} or ${NAME:-fallback}
_ENV_REF = re.compile(r"\$\{(?P<name>[A-Za-z_][A-Za-z0-9_]*)(?::-(?P<fallback>[^}]*))?\}")

MIN_PAGE_SIZE = 25
MAX_PAGE_SIZE = 500


def _expand_env(node: Any, where: str = "") -> Any:
    """Substitute environment references in every string value of a YAML tree.

    *where* is the dotted key path, used to point at the offending setting.
    """
    if isinstance(node, dict):
        return {key: _expand_env(value, f"{where}.{key}" if where else str(key)) for key, value in node.items()}
    if isinstance(node, list):
        return [_expand_env(value, f"{where}[{i}]") for i, value in enumerate(node)]
    if not isinstance(node, str):
        return node

    def lookup(match: re.Match) -> str:
        name, fallback = match.group("name"), match.group("fallback")
        if name in os.environ:
            return os.environ[name]
        if fallback is not None:
            return fallback
        raise ConfigError(f"{where or 'config'} references environment variable '{name}', which is not set")

    return _ENV_REF.sub(lookup, node)


@dataclass(frozen=True)
class APIConfig:
    base_url: str = "https://api.linode.com"
    api_version: str = "v4"
    token: str = field(default="", repr=False)
    timeout: float | None = None  # None leaves the transport default in place
    verify_ssl: bool = True
    user_agent: str = "linode-client"
    page_size: int | None = None  # None uses the server's default page size

    @property
    def root_url(self) -> str:
        return f"{self.base_url.rstrip('/')}/{self.api_version.strip('/')}"


@dataclass(frozen=True)
class LoggingConfig:
    level: str = "INFO"
    format: str = "json"  # "json" or "text"


@dataclass(frozen=True)
class AppConfig:
    api: APIConfig = field(default_factory=APIConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)


def _get_dataclass_type(ft: Any) -> type | None:
    """Return the underlying dataclass type from a type annotation (handles Optional/X|None)."""
    if isinstance(ft, type) and hasattr(ft, "__dataclass_fields__"):
        return ft
    if isinstance(ft, types.UnionType) or getattr(ft, "__origin__", None) is typing.Union:
        args = [a for a in ft.__args__ if a is not type(None)]
        if len(args) == 1 and isinstance(args[0], type) and hasattr(args[0], "__dataclass_fields__"):
            return args[0]
    return None


def _build_nested(cls: type, data: dict[str, Any]) -> Any:
    """Construct a frozen dataclass, recursively building nested dataclass fields."""
    if not isinstance(data, dict):
        return data
    field_types = typing.get_type_hints(cls)
    kwargs: dict[str, Any] = {}
    for key, value in data.items():
        if key not in field_types:
            continue
        dc_type = _get_dataclass_type(field_types[key])
        if dc_type is not None and isinstance(value, dict):
            kwargs[key] = _build_nested(dc_type, value)
        else:
            kwargs[key] = value
    return cls(**kwargs)


def load_config(path: str | Path) -> AppConfig:
    """Load and validate configuration from a YAML file."""
    path = Path(path)
    if not path.is_file():
        raise ConfigError(f"Configuration file not found: {path}")

    with open(path) as f:
        raw = yaml.safe_load(f)

    if not isinstance(raw, dict):
        raise ConfigError("Configuration file must be a YAML mapping")

    raw = _expand_env(raw)
    config = _build_nested(AppConfig, raw)
    _validate(config)
    return config


_EXPECTED_TYPES: dict[str, tuple[type, ...]] = {
    "api.base_url": (str,),
    "api.api_version": (str,),
    "api.token": (str,),
    "api.timeout": (int, float, type(None)),
    "api.verify_ssl": (bool,),
    "api.user_agent": (str,),
    "api.page_size": (int, type(None)),
    "logging.level": (str,),
    "logging.format": (str,),
}


def _check_types(config: AppConfig) -> None:
    """Reject YAML values of the wrong type before any range checks run."""
    for section, section_type in (("api", APIConfig), ("logging", LoggingConfig)):
        if not isinstance(getattr(config, section), section_type):
            raise ConfigError(f"{section} must be a mapping")

    for dotted, expected in _EXPECTED_TYPES.items():
        section, name = dotted.split(".")
        value = getattr(getattr(config, section), name)
        # bool is an int subclass; only verify_ssl may be a bool
        wrong_bool = isinstance(value, bool) and bool not in expected
        if wrong_bool or not isinstance(value, expected):
            names = " or ".join("null" if t is type(None) else t.__name__ for t in expected)
            raise ConfigError(f"{dotted} must be {names}, got {type(value).__name__} {value!r}")


def _validate(config: AppConfig) -> None:
    """Validate configuration values."""
    _check_types(config)

    if not config.api.token:
        raise ConfigError("api.token is required")

    if not config.api.base_url.startswith(("http://", "https://")):
        raise ConfigError("api.base_url must start with http:// or https://")

    if not config.api.api_version.strip("/"):
        raise ConfigError("api.api_version must not be empty")

    page_size = config.api.page_size
    if page_size is not None and not MIN_PAGE_SIZE <= page_size <= MAX_PAGE_SIZE:
        raise ConfigError(f"api.page_size must be between {MIN_PAGE_SIZE} and {MAX_PAGE_SIZE}")

    if config.api.timeout is not None and config.api.timeout <= 0:
        raise ConfigError("api.timeout must be positive when set")

    if config.logging.format not in ("json", "text"):
        raise ConfigError("logging.format must be 'json' or 'text'")
