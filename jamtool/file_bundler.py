"""Collect the files that make up a buildpack."""

from __future__ import annotations

import io
import os
import stat
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import BinaryIO

from jamtool.cargo import Config, encode_config


@dataclass(frozen=True)
class FileInfo:
    """Name, size, ``st_mode``-style mode and modification time of a file."""

    name: str
    size: int
    mode: int
    mtime: datetime

    @property
    def is_dir(self) -> bool:
        return stat.S_ISDIR(self.mode)

    @property
    def is_symlink(self) -> bool:
        return stat.S_ISLNK(self.mode)

    @property
    def permissions(self) -> int:
        return stat.S_IMODE(self.mode)


@dataclass
class BundledFile:
    """A file to include in a buildpack; symlinks carry a link and no reader."""

    name: str
    info: FileInfo
    link: str = ""
    reader: BinaryIO | None = None


class BundleError(Exception):
    """Raised when an included file cannot be collected."""


class FileBundler:
    """Builds the list of files to package from a buildpack directory."""

    def bundle(self, root, paths, config: Config) -> list[BundledFile]:
        """Return bundled files for ``paths``; ``buildpack.toml`` is rendered from ``config``."""
        return [self._bundle_one(os.fspath(root), path, config) for path in paths]

    def _bundle_one(self, root: str, path: str, config: Config) -> BundledFile:
        if path == "buildpack.toml":
            content = encode_config(config).encode()
            info = FileInfo(path, len(content), stat.S_IFREG | 0o644, datetime.now(timezone.utc))
            return BundledFile(path, info, reader=io.BytesIO(content))

        full_path = os.path.join(root, path)
        try:
            result = os.lstat(full_path)
        except OSError as err:
            raise BundleError(f"error stating included file: {err}") from err
        info = FileInfo(os.path.basename(path), result.st_size, result.st_mode,
                        datetime.fromtimestamp(result.st_mtime, timezone.utc))

        if stat.S_ISREG(result.st_mode):
            try:
                return BundledFile(path, info, reader=open(full_path, "rb"))
            except OSError as err:
                raise BundleError(f"error opening included file: {err}") from err

        try:
            link = os.readlink(full_path)
        except OSError as err:
            raise BundleError(f"error readlinking included file: {err}") from err
        if not link.startswith(os.sep):
            link = os.path.normpath(os.path.join(root, link))
        return BundledFile(path, info, link=os.path.relpath(link, root))