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

"""Configuration helpers for the ``datacode`` command.

Settings are layered, later sources winning:

1. A TOML or YAML file (``datacode.toml`` in the working directory when no
   path is given; a missing default file is ignored).
2. ``DATACODE_*`` environment variables.
3. Command line overrides whose value is not ``None``.
"""

from __future__ import annotations

import os
import shlex
import tomllib
from collections.abc import Iterable, Mapping, MutableMapping
from dataclasses import dataclass
from enum import StrEnum
from pathlib import Path
from typing import Any, cast

import yaml

from ..errors import DatacodeError, PayloadError
from ..formatting import DEFAULT_FORMAT_COMMAND, FormatFailurePolicy
from ..payload import DEFAULT_COMPRESSION, Encoding, validate_level

DEFAULT_CONFIG_PATH = Path("datacode.toml")
DEFAULT_OUTPUT = Path("data.py")

ENV_OUTPUT = "DATACODE_OUTPUT"
ENV_PREFIX = "DATACODE_PREFIX"
ENV_SUFFIX = "DATACODE_SUFFIX"
ENV_COMPRESS = "DATACODE_COMPRESS"
ENV_LEVEL = "DATACODE_LEVEL"
ENV_ENCODING = "DATACODE_ENCODING"
ENV_PACKAGE = "DATACODE_PACKAGE"
ENV_FORMAT = "DATACODE_FORMAT"
ENV_FORMAT_COMMAND = "DATACODE_FORMAT_COMMAND"

_TRUE = frozenset({"1", "true", "yes", "on"})
_FALSE = frozenset({"0", "false", "no", "off"})

__all__ = ["DEFAULT_CONFIG_PATH", "ConfigError", "DatacodeConfig", "load_config"]


@dataclass(frozen=True, slots=True)
class DatacodeConfig:
    """Resolved configuration for one ``datacode`` run."""

    output: Path = DEFAULT_OUTPUT
    prefix: str = ""
    suffix: str = ""
    compress: bool = True
    level: int = DEFAULT_COMPRESSION
    encoding: Encoding = Encoding.BASE64
    package: str | None = None
    format_output: bool = True
    format_command: tuple[str, ...] = DEFAULT_FORMAT_COMMAND
    format_failure: FormatFailurePolicy = FormatFailurePolicy.INCLUDE_SOURCE
    force: bool = False


class ConfigError(DatacodeError, ValueError):
    """Raised when the datacode configuration is invalid."""


def load_config(
    path: Path | Mapping[str, Any] | None,
    cli_overrides: object | None = None,
    *,
    env: Mapping[str, str] | None = None,
) -> DatacodeConfig:
    """Load and validate the datacode configuration.

    Parameters
    ----------
    path:
        Path to the configuration file. ``None`` falls back to
        ``datacode.toml``. Tests may pass an in-memory mapping to skip
        filesystem I/O.
    cli_overrides:
        Mapping or namespace whose keys mirror ``DatacodeConfig`` field names.
    env:
        Optional environment mapping. Defaults to :data:`os.environ`.
    """

    env_map = dict(os.environ if env is None else env)

    if isinstance(path, Mapping):
        config_data: dict[str, object] = dict(cast(Mapping[str, object], path))
    else:
        config_path = path if path is not None else DEFAULT_CONFIG_PATH
        config_data = _load_config_file(config_path, explicit=path is not None)

    config = _normalise_config(config_data)
    config = _apply_environment_overrides(config=config, env=env_map)
    config = _apply_cli_overrides(config=config, overrides=cli_overrides)

    return _build_config(config)


def _load_config_file(path: Path, *, explicit: bool) -> dict[str, object]:
    if not path.exists():
        if not explicit:
            return {}
        msg = f"Configuration file not found: {path}"
        raise ConfigError(msg)

    suffix = path.suffix.lower()
    data: object
    try:
        if suffix == ".toml" or not suffix:
            with path.open("rb") as handle:
                data = tomllib.load(handle)
        elif suffix in {".yaml", ".yml"}:
            with path.open("r", encoding="utf-8") as handle:
                data = yaml.safe_load(handle) or {}
        else:
            msg = f"Unsupported configuration format: {path.suffix}"
            raise ConfigError(msg)
    except (tomllib.TOMLDecodeError, yaml.YAMLError) as error:
        msg = f"Cannot parse configuration file {path}: {error}"
        raise ConfigError(msg) from error

    if not isinstance(data, MutableMapping):
        msg = "Configuration file must contain a mapping at the root."
        raise ConfigError(msg)

    mapping = cast(MutableMapping[object, object], data)
    typed_data: dict[str, object] = {}
    for key, value in mapping.items():
        if not isinstance(key, str):
            msg = f"Configuration keys must be strings (got {key!r})."
            raise ConfigError(msg)
        typed_data[key] = value
    return typed_data


def _normalise_config(raw: Mapping[str, object]) -> dict[str, object]:
    section_obj = raw.get("datacode")
    if isinstance(section_obj, Mapping):
        raw = cast(Mapping[str, object], section_obj)

    config: dict[str, object] = {
        "output": raw.get("output"),
        "prefix": raw.get("prefix"),
        "suffix": raw.get("suffix"),
        "compress": raw.get("compress"),
        "level": raw.get("level"),
        "encoding": raw.get("encoding"),
        "package": raw.get("package"),
        "format_output": raw.get("format_output", raw.get("fmt")),
        "format_command": raw.get("format_command"),
        "format_failure": raw.get("format_failure"),
    }

    compression_obj = raw.get("compression")
    if isinstance(compression_obj, Mapping):
        compression = cast(Mapping[str, object], compression_obj)
        if compression.get("enabled") is not None:
            config["compress"] = compression["enabled"]
        if compression.get("level") is not None:
            config["level"] = compression["level"]

    format_obj = raw.get("format")
    if isinstance(format_obj, Mapping):
        format_section = cast(Mapping[str, object], format_obj)
        if format_section.get("enabled") is not None:
            config["format_output"] = format_section["enabled"]
        if format_section.get("command") is not None:
            config["format_command"] = format_section["command"]
        if format_section.get("on_failure") is not None:
            config["format_failure"] = format_section["on_failure"]

    return config


def _apply_environment_overrides(
    *, config: dict[str, object], env: Mapping[str, str]
) -> dict[str, object]:
    if ENV_OUTPUT in env:
        config["output"] = env[ENV_OUTPUT]
    if ENV_PREFIX in env:
        config["prefix"] = env[ENV_PREFIX]
    if ENV_SUFFIX in env:
        config["suffix"] = env[ENV_SUFFIX]
    if ENV_COMPRESS in env:
        config["compress"] = env[ENV_COMPRESS]
    if ENV_LEVEL in env:
        config["level"] = env[ENV_LEVEL]
    if ENV_ENCODING in env:
        config["encoding"] = env[ENV_ENCODING]
    if ENV_PACKAGE in env:
        config["package"] = env[ENV_PACKAGE]
    if ENV_FORMAT in env:
        config["format_output"] = env[ENV_FORMAT]
    if ENV_FORMAT_COMMAND in env:
        config["format_command"] = env[ENV_FORMAT_COMMAND]

    return config


def _apply_cli_overrides(
    *, config: dict[str, object], overrides: object | None
) -> dict[str, object]:
    if overrides is None:
        return config

    materialised: dict[str, object]
    if isinstance(overrides, Mapping):
        materialised = dict(cast(Mapping[str, object], overrides))
    elif hasattr(overrides, "__dict__"):
        materialised = {key: getattr(overrides, key) for key in vars(overrides)}
    else:
        msg = "CLI overrides must be a mapping or support attribute access."
        raise TypeError(msg)

    for key, value in materialised.items():
        if value is None:
            continue
        config[key] = value

    return config


def _build_config(config: Mapping[str, object]) -> DatacodeConfig:
    output = _coerce_path(config.get("output"), "output") or DEFAULT_OUTPUT
    level_value = config.get("level")
    level = (
        DEFAULT_COMPRESSION
        if level_value is None
        else _coerce_int(level_value, "level")
    )
    try:
        _ = validate_level(level)
    except PayloadError as error:
        raise ConfigError(str(error)) from error

    return DatacodeConfig(
        output=output,
        prefix=_coerce_optional_str(config.get("prefix"), "prefix") or "",
        suffix=_coerce_optional_str(config.get("suffix"), "suffix") or "",
        compress=_coerce_bool(config.get("compress"), "compress", default=True),
        level=level,
        encoding=_coerce_choice(config.get("encoding"), Encoding, Encoding.BASE64),
        package=_coerce_optional_str(config.get("package"), "package") or None,
        format_output=_coerce_bool(
            config.get("format_output"), "format_output", default=True
        ),
        format_command=_coerce_command(config.get("format_command")),
        format_failure=_coerce_choice(
            config.get("format_failure"),
            FormatFailurePolicy,
            FormatFailurePolicy.INCLUDE_SOURCE,
        ),
        force=_coerce_bool(config.get("force"), "force", default=False),
    )


def _coerce_path(value: object, field_name: str) -> Path | None:
    if value is None:
        return None
    if isinstance(value, Path):
        return value.expanduser()
    if isinstance(value, str):
        return Path(value).expanduser()
    msg = f"{field_name} must be a path-like value."
    raise ConfigError(msg)


def _coerce_optional_str(value: object, field_name: str) -> str | None:
    if value is None:
        return None
    if isinstance(value, str):
        return value
    msg = f"{field_name} must be a string."
    raise ConfigError(msg)


def _coerce_bool(value: object, field_name: str, *, default: bool) -> bool:
    if value is None:
        return default
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in _TRUE:
            return True
        if lowered in _FALSE:
            return False
    msg = f"{field_name} must be a boolean (got {value!r})."
    raise ConfigError(msg)


def _coerce_int(value: object, field_name: str) -> int:
    if isinstance(value, bool):
        msg = f"{field_name} must be an integer."
        raise ConfigError(msg)
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        try:
            return int(value)
        except ValueError as exc:
            msg = f"{field_name} must be an integer: {value!r}"
            raise ConfigError(msg) from exc
    msg = f"{field_name} must be an integer."
    raise ConfigError(msg)


def _coerce_choice[E: StrEnum](
    value: object, enum_type: type[E], default: E
) -> E:
    if value is None:
        return default
    try:
        return enum_type(value)
    except ValueError as exc:
        choices = ", ".join(member.value for member in enum_type)
        msg = f"Invalid value {value!r}; expected one of: {choices}"
        raise ConfigError(msg) from exc


def _coerce_command(value: object) -> tuple[str, ...]:
    if value is None:
        return DEFAULT_FORMAT_COMMAND
    if isinstance(value, str):
        parts = tuple(shlex.split(value))
    elif isinstance(value, Iterable):
        items = tuple(cast(Iterable[object], value))
        if not all(isinstance(item, str) for item in items):
            msg = "format_command entries must be strings."
            raise ConfigError(msg)
        parts = cast(tuple[str, ...], items)
    else:
        msg = "format_command must be a string or a list of strings."
        raise ConfigError(msg)
    if not parts:
        msg = "format_command must not be empty."
        raise ConfigError(msg)
    return parts
