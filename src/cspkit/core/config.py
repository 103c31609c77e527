# Copyright 2026 Firefly Software Solutions Inc.
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.
"""Layered configuration: packaged defaults, YAML/TOML files, env vars, dataclass binding."""

from __future__ import annotations

import dataclasses
import importlib.resources
import os
import re
import tomllib
from collections.abc import Callable
from pathlib import Path
from typing import Any, TypeVar, get_type_hints

import yaml  # type: ignore[import-untyped]

from cspkit.kernel.exceptions import ConfigurationException

T = TypeVar("T")

_PLACEHOLDER_RE = re.compile(r"\$\{([^}]+)\}")

_CONFIG_PROPERTIES_ATTR = "__cspkit_config_prefix__"

_ENV_PREFIX = "CSPKIT_"

_MAX_PLACEHOLDER_DEPTH = 10


def config_properties(prefix: str) -> Callable[[type[T]], type[T]]:
    """Mark a dataclass as bindable to a configuration prefix.

    Usage:
        @config_properties(prefix="cspkit.headers")
        @dataclass
        class SecurityHeadersProperties:
            enabled: bool = True
    """

    def decorator(cls: type[T]) -> type[T]:
        setattr(cls, _CONFIG_PROPERTIES_ATTR, prefix)
        return cls

    return decorator


class Config:
    """Hierarchical configuration with dot-notation access and env var overrides.

    Priority (highest wins):
    1. Environment variables (CSPKIT_SECTION_KEY format)
    2. Profile overlays, then the base config file
    3. Packaged defaults (cspkit-defaults.yaml)
    4. Dataclass defaults
    """

    def __init__(self, data: dict[str, Any] | None = None) -> None:
        self._data: dict[str, Any] = data or {}
        self._loaded_sources: list[str] = []

    @property
    def loaded_sources(self) -> list[str]:
        """Config file paths that were loaded, in merge order."""
        return list(self._loaded_sources)

    def to_dict(self) -> dict[str, Any]:
        return dict(self._data)

    @classmethod
    def from_file(
        cls,
        path: str | Path,
        active_profiles: list[str] | None = None,
        load_defaults: bool = True,
    ) -> Config:
        """Load *path* plus ``{stem}-{profile}{suffix}`` overlays beside it.

        A missing *path* is not an error; the packaged defaults still apply.
        """
        path = Path(path)
        data: dict[str, Any] = {}
        sources: list[str] = []

        if load_defaults:
            data = cls._load_defaults()
            sources.append("cspkit-defaults.yaml (defaults)")

        if path.is_file():
            data = cls._deep_merge(data, cls._load_config_data(path))
            sources.append(str(path))

            for profile in active_profiles or []:
                overlay = path.parent / f"{path.stem}-{profile}{path.suffix}"
                if overlay.is_file():
                    data = cls._deep_merge(data, cls._load_config_data(overlay))
                    sources.append(f"{overlay} (profile: {profile})")

        instance = cls(data)
        instance._loaded_sources = sources
        return instance

    @staticmethod
    def _load_config_data(path: Path) -> dict[str, Any]:
        try:
            if path.suffix == ".toml":
                with open(path, "rb") as f:
                    data = tomllib.load(f) or {}
            else:
                with open(path) as f:
                    data = yaml.safe_load(f) or {}
        except (yaml.YAMLError, tomllib.TOMLDecodeError) as exc:
            raise ConfigurationException(
                f"Cannot parse config file {path}: {exc}",
                code="INVALID_CONFIG_FILE",
                context={"path": str(path)},
            ) from exc
        if not isinstance(data, dict):
            raise ConfigurationException(
                f"Config file {path} must hold a mapping at the top level",
                code="INVALID_CONFIG_FILE",
                context={"path": str(path)},
            )
        return data

    @staticmethod
    def _load_defaults() -> dict[str, Any]:
        defaults_file = importlib.resources.files("cspkit.resources").joinpath("cspkit-defaults.yaml")
        with importlib.resources.as_file(defaults_file) as p, open(p) as f:
            return yaml.safe_load(f) or {}

    @staticmethod
    def _deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
        """Recursively merge override into base, with override values winning."""
        merged = dict(base)
        for key, value in override.items():
            if key in merged and isinstance(merged[key], dict) and isinstance(value, dict):
                merged[key] = Config._deep_merge(merged[key], value)
            else:
                merged[key] = value
        return merged

    def _lookup(self, key: str) -> Any:
        current: Any = self._data
        for part in key.split("."):
            if not isinstance(current, dict):
                return None
            current = current.get(part)
            if current is None:
                return None
        return current

    def get(self, key: str, default: Any = None) -> Any:
        """Get a value by dot-notation key, checking env vars first.

        ``cspkit.headers.report-uri`` is overridden by
        ``CSPKIT_HEADERS_REPORT_URI``. String values may hold ``${ENV}``,
        ``${config.key}`` or ``${key:default}`` placeholders.
        """
        env_base = key.removeprefix("cspkit.")
        env_val = os.environ.get(_ENV_PREFIX + env_base.upper().replace(".", "_").replace("-", "_"))
        if env_val is not None:
            return env_val

        value = self._lookup(key)
        if value is None:
            return default
        if isinstance(value, str) and "${" in value:
            return self._resolve_placeholders(value)
        return value

    def _resolve_placeholders(self, value: str, _depth: int = 0) -> str:
        if _depth > _MAX_PLACEHOLDER_DEPTH:
            raise ConfigurationException(
                f"Max recursion depth exceeded resolving placeholders in '{value}'",
                code="PLACEHOLDER_CYCLE",
            )

        def _replace(match: re.Match[str]) -> str:
            inner = match.group(1)
            ref_key, _, default_val = inner.partition(":")
            has_default = ":" in inner

            env_val = os.environ.get(ref_key)
            if env_val is not None:
                return env_val

            current = self._lookup(ref_key)
            if current is not None:
                resolved = str(current)
                if "${" in resolved:
                    resolved = self._resolve_placeholders(resolved, _depth + 1)
                return resolved

            if has_default:
                return default_val

            raise ConfigurationException(
                f"Cannot resolve placeholder '${{{inner}}}': not found in environment or config",
                code="UNRESOLVED_PLACEHOLDER",
                context={"placeholder": inner},
            )

        return _PLACEHOLDER_RE.sub(_replace, value)

    def get_section(self, prefix: str) -> dict[str, Any]:
        """Get the raw mapping stored under *prefix*, or ``{}``."""
        section = self._lookup(prefix)
        return section if isinstance(section, dict) else {}

    def bind(self, config_cls: type[T]) -> T:
        """Bind configuration to a ``@config_properties`` dataclass.

        Keys may be written with dashes (``report-uri``) or underscores.
        Environment overrides apply per field.
        """
        prefix = getattr(config_cls, _CONFIG_PROPERTIES_ATTR, None)
        if prefix is None:
            raise ConfigurationException(
                f"{config_cls.__name__} is not decorated with @config_properties",
                code="NOT_BINDABLE",
            )

        section = {str(k).replace("-", "_"): v for k, v in self.get_section(prefix).items()}
        hints = get_type_hints(config_cls)
        kwargs: dict[str, Any] = {}
        for field in dataclasses.fields(config_cls):  # type: ignore[arg-type]
            value = self.get(f"{prefix}.{field.name}")
            if value is None:
                if field.name not in section:
                    continue
                value = section[field.name]
                if isinstance(value, str) and "${" in value:
                    value = self._resolve_placeholders(value)
            expected_type = hints.get(field.name)
            try:
                if expected_type is int and isinstance(value, str):
                    value = int(value)
                elif expected_type is float and isinstance(value, str):
                    value = float(value)
                elif expected_type is bool and isinstance(value, str):
                    value = value.lower() in ("true", "1", "yes")
            except ValueError as exc:
                raise ConfigurationException(
                    f"Cannot convert '{prefix}.{field.name}' value {value!r}",
                    code="TYPE_MISMATCH",
                    context={"field": field.name},
                ) from exc
            kwargs[field.name] = value

        return config_cls(**kwargs)
