"""Download dependencies into a local cache directory."""

from __future__ import annotations

import dataclasses
import shutil
from contextlib import closing
from pathlib import Path
from typing import BinaryIO, Protocol

from jamtool.cargo import ConfigMetadataDependency, ValidatedReader, ValidationError
from jamtool.logger import Logger


class Downloader(Protocol):
    def drop(self, root: str, uri: str) -> BinaryIO:
        """Return a readable binary stream for the URI."""


class DependencyCacheError(Exception):
    """Raised when a dependency cannot be cached."""


class DependencyCacher:
    """Downloads dependencies and rewrites their URIs to the local copies."""

    def __init__(self, downloader: Downloader, logger: Logger) -> None:
        self.downloader = downloader
        self.logger = logger

    def cache(self, root, deps):
        """Store each dependency under ``root/dependencies`` and return updated copies."""
        self.logger.process("Downloading dependencies...")
        directory = Path(root) / "dependencies"
        try:
            directory.mkdir(parents=True, exist_ok=True)
        except OSError as err:
            raise DependencyCacheError(f"failed to create dependencies directory: {err}") from err
        cached = [self._cache_one(directory, dep) for dep in deps or []]
        self.logger.break_line()
        return cached

    def _cache_one(self, directory: Path, dep: ConfigMetadataDependency) -> ConfigMetadataDependency:
        self.logger.subprocess("%s (%s) [%s]", dep.id, dep.version, ", ".join(dep.stacks))
        try:
            source = self.downloader.drop("", dep.uri)
        except Exception as err:
            raise DependencyCacheError(f"failed to download dependency: {err}") from err

        with closing(source):
            checksum, digest = dep.checksum, dep.checksum.partition(":")[2]
            if not checksum:
                checksum, digest = f"sha256:{dep.sha256}", dep.sha256
            if checksum == "sha256:":
                raise DependencyCacheError(
                    f"failed to create file for {dep.id}: no sha256 or checksum provided"
                )
            self.logger.action("↳  dependencies/%s", digest)
            try:
                destination = open(directory / digest, "wb")
            except OSError as err:
                raise DependencyCacheError(f"failed to create destination file: {err}") from err
            with destination:
                try:
                    shutil.copyfileobj(ValidatedReader(source, checksum), destination)
                except (OSError, ValidationError) as err:
                    raise DependencyCacheError(f"failed to copy dependency: {err}") from err

        return dataclasses.replace(dep, uri=f"file:///dependencies/{digest}")