"""Render buildpack metadata as Markdown or JSON."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import TextIO

from jamtool.cargo import Config
from jamtool.semver import parse_version


@dataclass
class BuildpackMetadata:
    """A buildpack configuration together with the digest of its image."""

    config: Config = field(default_factory=Config)
    sha256: str = ""


def _stacks_section(config: Config) -> list[str]:
    if not config.stacks:
        return []
    parts = ["#### Supported Stacks:\n"]
    parts.extend(f"- `{stack.id}`\n" for stack in sorted(config.stacks, key=lambda s: s.id))
    parts.append("\n")
    return parts


def _default_versions_section(config: Config) -> list[str]:
    defaults = config.metadata.default_versions
    if not defaults:
        return []
    parts = ["#### Default Dependency Versions:\n| ID | Version |\n|---|---|\n"]
    parts.extend(f"| {key} | {defaults[key]} |\n" for key in sorted(defaults))
    parts.append("\n")
    return parts


def _dependencies_section(config: Config) -> list[str]:
    dependencies = config.metadata.dependencies
    if not dependencies:
        return []

    grouped: dict[tuple[str, str, str], list[str]] = {}
    for dep in dependencies:
        checksum = dep.checksum or f"sha256:{dep.sha256}"
        stacks = grouped.setdefault((dep.id, dep.version, checksum), [])
        stacks.extend(dep.stacks)
        stacks.sort()

    rows = [(key, " ".join(stacks)) for key, stacks in grouped.items()]
    # Stable sorts applied from the least to the most significant key:
    # id ascending, then version descending, then stacks ascending.
    rows.sort(key=lambda row: row[1])
    rows.sort(key=lambda row: parse_version(row[0][1]), reverse=True)
    rows.sort(key=lambda row: row[0][0])

    parts = ["#### Dependencies:\n| Name | Version | Stacks | Checksum |\n|---|---|---|---|\n"]
    parts.extend(
        f"| {dep_id} | {version} | {stacks} | {checksum} |\n"
        for (dep_id, version, checksum), stacks in rows
    )
    parts.append("\n")
    return parts


def _implementation(config: Config) -> str:
    return "".join(
        _stacks_section(config)
        + _default_versions_section(config)
        + _dependencies_section(config)
    )


def _bool(value: bool) -> str:
    return "true" if value else "false"


class Formatter:
    """Writes descriptions of buildpackages to a text stream."""

    def __init__(self, writer: TextIO) -> None:
        self.writer = writer

    def markdown(self, entries: list[BuildpackMetadata]) -> None:
        """Write a Markdown summary of a buildpackage and any buildpacks it includes."""
        if not entries:
            raise ValueError("no buildpack metadata to format")

        if len(entries) == 1:
            self.writer.write(self._implementation_markdown(entries[0]))
        else:
            self.writer.write(self._family_markdown(list(entries)))

    @staticmethod
    def _implementation_markdown(entry: BuildpackMetadata) -> str:
        buildpack = entry.config.buildpack
        return (
            f"## {buildpack.name} {buildpack.version}\n"
            f"\n**ID:** `{buildpack.id}`\n\n"
            f"**Digest:** `{entry.sha256}`\n\n"
            + _implementation(entry.config)
        )

    @staticmethod
    def _family_markdown(entries: list[BuildpackMetadata]) -> str:
        family = next((entry for entry in entries if entry.config.order), None)
        if family is None:
            family = BuildpackMetadata()
        else:
            entries.remove(family)

        buildpack = family.config.buildpack
        parts = [
            f"## {buildpack.name} {buildpack.version}\n\n**ID:** `{buildpack.id}`\n\n",
            f"**Digest:** `{family.sha256}`\n\n",
            "#### Included Buildpackages:\n",
            "| Name | ID | Version |\n|---|---|---|\n",
        ]
        parts.extend(
            f"| {e.config.buildpack.name} | {e.config.buildpack.id} | {e.config.buildpack.version} |\n"
            for e in entries
        )

        parts.append("\n<details>\n<summary>Order Groupings</summary>\n\n")
        for order in family.config.order:
            parts.append("| ID | Version | Optional |\n|---|---|---|\n")
            parts.extend(
                f"| {g.id} | {g.version} | {_bool(g.optional)} |\n" for g in order.group
            )
            parts.append("\n")
        parts.append("</details>\n\n---\n")

        for entry in entries:
            child = entry.config.buildpack
            parts.append(f"\n<details>\n<summary>{child.name} {child.version}</summary>\n")
            parts.append(f"\n**ID:** `{child.id}`\n\n")
            parts.append(_implementation(entry.config))
            parts.append("---\n\n</details>\n")

        return "".join(parts)

    def json(self, entries: list[BuildpackMetadata]) -> None:
        """Write the buildpackage configuration, and its children if any, as JSON."""
        if not entries:
            raise ValueError("no buildpack metadata to format")

        buildpackage = entries[0].config
        children: list[Config] = []
        if len(entries) > 1:
            for entry in entries:
                if entry.config.order:
                    buildpackage = entry.config
                else:
                    children.append(entry.config)

        output: dict = {"buildpackage": buildpackage.to_dict()}
        if children:
            output["children"] = [child.to_dict() for child in children]

        text = json.dumps(output, ensure_ascii=False, separators=(",", ":"))
        text = text.replace("&", "\\u0026").replace("<", "\\u003c").replace(">", "\\u003e")
        self.writer.write(text + "\n")