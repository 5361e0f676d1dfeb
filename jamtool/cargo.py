"""Buildpack configuration model, TOML encoding and checksum validation."""

from __future__ import annotations

import hashlib
from dataclasses import dataclass, field, fields, is_dataclass
from datetime import datetime, timedelta
from typing import Any, BinaryIO

import tomli_w

_KEEP = {"keep": True}


def _is_empty(value: Any) -> bool:
    return value is None or value is False or value == 0 or value in ("", [], {})


def _to_data(obj: Any) -> Any:
    if is_dataclass(obj):
        result = {}
        for f in fields(obj):
            value = getattr(obj, f.name)
            if is_dataclass(value) or f.metadata.get("keep") or not _is_empty(value):
                result[f.metadata.get("key", f.name.replace("_", "-"))] = _to_data(value)
        return result
    if isinstance(obj, list):
        return [_to_data(item) for item in obj]
    if isinstance(obj, dict):
        return {key: _to_data(value) for key, value in obj.items()}
    if isinstance(obj, datetime):
        offset = obj.utcoffset()
        if offset is None or offset == timedelta(0):
            return obj.replace(tzinfo=None).isoformat() + "Z"
        return obj.isoformat()
    return obj


@dataclass
class ConfigBuildpack:
    """Identity of a buildpack."""

    id: str = ""
    name: str = ""
    version: str = ""
    homepage: str = ""
    clear_env: bool = False
    description: str = ""
    keywords: list[str] = field(default_factory=list)
    licenses: list[dict[str, str]] = field(default_factory=list)
    sbom_formats: list[str] = field(default_factory=list)


@dataclass
class ConfigStack:
    """A stack the buildpack supports."""

    id: str = ""
    mixins: list[str] = field(default_factory=list)


@dataclass
class ConfigOrderGroup:
    """One buildpack reference within an order group."""

    id: str = ""
    version: str = ""
    optional: bool = False


@dataclass
class ConfigOrder:
    """An ordered group of buildpacks."""

    group: list[ConfigOrderGroup] = field(default_factory=list)


@dataclass
class ConfigMetadataDependency:
    """A dependency entry in buildpack metadata."""

    checksum: str = ""
    cpe: str = ""
    purl: str = ""
    deprecation_date: datetime | None = field(default=None, metadata={"key": "deprecation_date"})
    id: str = ""
    licenses: list[Any] = field(default_factory=list)
    name: str = ""
    sha256: str = ""
    source: str = ""
    source_sha256: str = field(default="", metadata={"key": "source_sha256"})
    source_checksum: str = ""
    stacks: list[str] = field(default_factory=list)
    strip_components: int = 0
    uri: str = ""
    version: str = ""


@dataclass
class ConfigMetadataDependencyConstraint:
    """Selects the newest matching patches of a dependency."""

    constraint: str = field(default="", metadata=_KEEP)
    id: str = field(default="", metadata=_KEEP)
    patches: int = field(default=0, metadata=_KEEP)


@dataclass
class ConfigMetadata:
    """The metadata table of a buildpack configuration."""

    include_files: list[str] = field(default_factory=list)
    pre_package: str = ""
    dependencies: list[ConfigMetadataDependency] = field(default_factory=list)
    dependency_constraints: list[ConfigMetadataDependencyConstraint] = field(default_factory=list)
    default_versions: dict[str, str] = field(default_factory=dict)


@dataclass
class Config:
    """A complete buildpack configuration."""

    api: str = ""
    buildpack: ConfigBuildpack = field(default_factory=ConfigBuildpack)
    metadata: ConfigMetadata = field(default_factory=ConfigMetadata)
    stacks: list[ConfigStack] = field(default_factory=list)
    order: list[ConfigOrder] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        """Return the configuration as plain data with empty fields left out."""
        return _to_data(self)


def encode_config(config: Config) -> str:
    """Render the configuration as a TOML document."""
    return tomli_w.dumps(config.to_dict())


class ValidationError(Exception):
    """Raised when streamed content does not match its checksum."""


class ValidatedReader:
    """Wraps a binary stream and checks its ``algorithm:hex`` checksum once fully read."""

    def __init__(self, reader: BinaryIO, checksum: str) -> None:
        algorithm, separator, expected = checksum.partition(":")
        if not separator:
            algorithm, expected = "sha256", checksum
        if algorithm not in ("sha256", "sha512"):
            raise ValidationError(f'unsupported algorithm "{algorithm}"')
        self._reader = reader
        self._expected = expected
        self._hash = hashlib.new(algorithm)

    def read(self, size: int | None = -1) -> bytes:
        """Read from the wrapped stream, verifying the checksum at the end."""
        data = self._reader.read(size)
        self._hash.update(data)
        if size != 0 and (not data or size is None or size < 0):
            if self._hash.hexdigest() != self._expected:
                raise ValidationError("validation error: checksum does not match")
        return data

    def close(self) -> None:
        """Close the wrapped stream."""
        self._reader.close()