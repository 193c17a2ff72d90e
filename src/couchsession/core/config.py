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
"""Type-safe configuration with YAML/TOML files, env vars, and dataclass binding."""

from __future__ import annotations

import dataclasses
import importlib.resources
import os
import re
import tomllib
import types
from collections.abc import Callable
from pathlib import Path
from typing import Any, TypeVar, Union, get_args, get_origin, get_type_hints

import yaml  # type: ignore[import-untyped]

T = TypeVar("T")

_PLACEHOLDER_RE = re.compile(r"\$\{([^}]+)\}")
_CAMEL_RE = re.compile(r"(?<=[a-z0-9])([A-Z])")

_CONFIG_PROPERTIES_ATTR = "__couchsession_config_prefix__"
_FILE_STEM = "couchsession"
_ENV_PREFIX = "COUCHSESSION_"


def config_properties(prefix: str) -> Callable[[type[T]], type[T]]:
    """Mark a dataclass as bindable to a configuration prefix.

    Usage:
        @config_properties(prefix="couchsession.store")
        @dataclass(frozen=True)
        class SessionStoreProperties:
            bucket: str = "default"
    """

    def decorator(cls: type[T]) -> type[T]:
        setattr(cls, _CONFIG_PROPERTIES_ATTR, prefix)
        return cls

    return decorator


def normalize_key(key: str) -> str:
    """Map ``operationTimeout`` and ``operation-timeout`` to ``operation_timeout``."""
    return _CAMEL_RE.sub(r"_\1", key).replace("-", "_").lower()


def _unwrap_optional(hint: Any) -> Any:
    """Return ``X`` for ``X | None``; any other hint is returned unchanged."""
    if get_origin(hint) in (Union, types.UnionType):
        args = [a for a in get_args(hint) if a is not type(None)]
        if len(args) == 1:
            return args[0]
    return hint


class Config:
    """Dot-notation view over the ``couchsession`` configuration tree.

    Priority (highest wins):
    1. Environment variables (COUCHSESSION_SECTION_KEY format)
    2. Values from the loaded file or the dict passed in
    3. Package defaults (couchsession-defaults.yaml), when loaded
    4. Dataclass defaults
    """

    def __init__(self, data: dict[str, Any] | None = None) -> None:
        self._data: dict[str, Any] = data or {}

    @classmethod
    def from_file(cls, path: str | Path, load_defaults: bool = True) -> Config:
        """Load a YAML or TOML file layered over the package defaults.

        A missing file is not an error; the defaults alone are returned.
        """
        path = Path(path)
        data = cls._load_package_defaults() if load_defaults else {}
        if path.is_file():
            data = cls._merge(data, cls._read(path))
        return cls(data)

    @staticmethod
    def _read(path: Path) -> dict[str, Any]:
        if path.suffix == ".toml":
            with open(path, "rb") as f:
                return tomllib.load(f)
        with open(path) as f:
            return yaml.safe_load(f) or {}

    @staticmethod
    def _load_package_defaults() -> dict[str, Any]:
        defaults_file = importlib.resources.files("couchsession.resources").joinpath(f"{_FILE_STEM}-defaults.yaml")
        return yaml.safe_load(defaults_file.read_text()) or {}

    @staticmethod
    def _merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
        merged = dict(base)
        for key, value in override.items():
            if isinstance(merged.get(key), dict) and isinstance(value, dict):
                merged[key] = Config._merge(merged[key], value)
            else:
                merged[key] = value
        return merged

    def get(self, key: str, default: Any = None) -> Any:
        """Get a value by dot-notation key, checking env vars first.

        ``${NAME}`` and ``${NAME:fallback}`` inside string values are
        replaced from the environment, so secrets stay out of the file.
        """
        env_val = os.environ.get(self._env_key(key))
        if env_val is not None:
            return env_val

        current: Any = self._data
        for part in key.split("."):
            if not isinstance(current, dict) or current.get(part) is None:
                return default
            current = current[part]

        if isinstance(current, str):
            return self._expand_env(current)
        return current

    @staticmethod
    def _env_key(key: str) -> str:
        # couchsession.store.bucket -> COUCHSESSION_STORE_BUCKET
        base = key.removeprefix(f"{_FILE_STEM}.")
        return _ENV_PREFIX + base.upper().replace(".", "_").replace("-", "_")

    @staticmethod
    def _expand_env(value: str) -> str:
        def _replace(match: re.Match[str]) -> str:
            name, sep, fallback = match.group(1).partition(":")
            env_val = os.environ.get(name)
            if env_val is not None:
                return env_val
            if sep:
                return fallback
            raise ValueError(f"Environment variable {name!r} referenced in config is not set")

        return _PLACEHOLDER_RE.sub(_replace, value)

    def get_section(self, prefix: str) -> dict[str, Any]:
        """Get all values under a prefix as a dict, placeholders expanded."""
        current: Any = self._data
        for part in prefix.split("."):
            if not isinstance(current, dict):
                return {}
            current = current.get(part, {})
        if not isinstance(current, dict):
            return {}
        return {k: self._expand_env(v) if isinstance(v, str) else v for k, v in current.items()}

    def bind(self, config_cls: type[T]) -> T:
        """Bind configuration to a @config_properties dataclass.

        Section keys are normalized (camelCase and kebab-case become
        snake_case), environment overrides are applied per field, and
        string values are coerced to ``int``/``float``/``bool`` fields.
        """
        prefix = getattr(config_cls, _CONFIG_PROPERTIES_ATTR, None)
        if prefix is None:
            raise ValueError(f"{config_cls.__name__} is not decorated with @config_properties")

        section = {normalize_key(k): v for k, v in self.get_section(prefix).items()}

        hints = get_type_hints(config_cls)
        kwargs: dict[str, Any] = {}
        for field in dataclasses.fields(config_cls):  # type: ignore[arg-type]
            env_val = os.environ.get(self._env_key(f"{prefix}.{field.name}"))
            if env_val is not None:
                value: Any = env_val
            elif field.name in section:
                value = section[field.name]
            else:
                continue

            expected_type = _unwrap_optional(hints.get(field.name))
            if isinstance(value, str):
                if expected_type is int:
                    value = int(value)
                elif expected_type is float:
                    value = float(value)
                elif expected_type is bool:
                    value = value.lower() in ("true", "1", "yes")
            kwargs[field.name] = value

        return config_cls(**kwargs)
