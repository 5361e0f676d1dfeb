"""Selection of dependency versions that satisfy buildpack constraints."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone

from jamtool.cargo import Config, ConfigMetadataDependency, ConfigMetadataDependencyConstraint
from jamtool.semver import parse_constraint, parse_version


@dataclass
class Stack:
    """A stack a dependency was built for."""

    id: str = ""


@dataclass
class Dependency:
    """A single dependency entry as published by a dependency server."""

    deprecation_date: str = ""
    id: str = ""
    sha256: str = ""
    source: str = ""
    source_sha256: str = ""
    stacks: list[Stack] = field(default_factory=list)
    uri: str = ""
    version: str = ""
    created_at: str = ""
    modified_at: str = ""
    cpe: str = ""
    purl: str = ""
    licenses: list[str] = field(default_factory=list)
    checksum: str = ""
    source_checksum: str = ""


def _deprecation(text: str) -> datetime | None:
    if not text:
        return None
    try:
        return datetime.fromisoformat(text)
    except ValueError:
        return datetime(1, 1, 1, tzinfo=timezone.utc)


def get_dependencies_within_constraint(
    dependencies: list[Dependency],
    constraint: ConfigMetadataDependencyConstraint,
    dependency_name: str,
) -> list[ConfigMetadataDependency]:
    """Return the newest ``constraint.patches`` matching dependencies, lowest first."""
    if not dependencies:
        return []
    checker = parse_constraint(constraint.constraint)
    matching = [
        ConfigMetadataDependency(
            deprecation_date=_deprecation(dep.deprecation_date),
            cpe=dep.cpe,
            purl=dep.purl,
            id=dep.id,
            name=dependency_name,
            sha256=dep.sha256,
            source=dep.source,
            source_sha256=dep.source_sha256,
            uri=dep.uri,
            version=dep.version.replace("v", ""),
            checksum=dep.checksum,
            source_checksum=dep.source_checksum,
            stacks=[stack.id for stack in dep.stacks],
            licenses=list(dep.licenses),
        )
        for dep in dependencies
        if checker.check(parse_version(dep.version)) and dep.id == constraint.id
    ]
    matching.sort(key=lambda dep: parse_version(dep.version))
    if constraint.patches > len(matching):
        return matching
    return matching[len(matching) - constraint.patches:]


def get_cargo_dependencies_within_constraint(
    dependencies: list[ConfigMetadataDependency],
    constraint: ConfigMetadataDependencyConstraint,
) -> list[ConfigMetadataDependency]:
    """Return matching dependencies for the newest ``constraint.patches`` versions.

    Stack variants of one version all count as a single patch; exact duplicates are dropped.
    """
    checker = parse_constraint(constraint.constraint)
    by_version: dict[str, list[ConfigMetadataDependency]] = {}
    for dep in dependencies:
        version = parse_version(dep.version)
        if dep.id != constraint.id or not checker.check(version):
            continue
        variants = by_version.setdefault(dep.version, [])
        if all(variant.stacks != dep.stacks for variant in variants):
            variants.append(dep)

    versions = sorted(by_version, key=parse_version)
    start = max(len(versions) - constraint.patches, 0)
    return [dep for version in versions[start:] for dep in by_version[version]]


def find_dependency_name(dependency_id: str, config: Config) -> str:
    """Return the name of the last dependency in the config with the given id."""
    names = [dep.name for dep in config.metadata.dependencies if dep.id == dependency_id]
    return names[-1] if names else ""