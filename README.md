# jamtool

A library of helpers for putting buildpackages together:

- `jamtool.semver` – semantic versions (`parse_version`, `Version`) and
  constraints such as `1.*`, `>=1.2, <2`, `~1.2` or `^0.3`
  (`parse_constraint`, `Constraint.check`). Parse failures raise `SemverError`.
- `jamtool.cargo` – dataclasses for a `buildpack.toml` (`Config`,
  `ConfigBuildpack`, `ConfigMetadata`, `ConfigMetadataDependency`,
  `ConfigMetadataDependencyConstraint`, `ConfigStack`, `ConfigOrder`,
  `ConfigOrderGroup`), `Config.to_dict()` which leaves empty fields out,
  `encode_config()` which renders TOML, and `ValidatedReader`, a stream
  wrapper that checks a `sha256:` or `sha512:` checksum once the stream has
  been read to the end and raises `ValidationError` on a mismatch.
- `jamtool.dependency` – choosing the newest matching dependency versions.
- `jamtool.dependency_cacher` – downloading dependencies into a local
  `dependencies/` directory.
- `jamtool.file_bundler` – gathering the files of a buildpack for packaging.
- `jamtool.formatter` – rendering buildpack metadata as Markdown or JSON.
- `jamtool.logger` – indented progress output.

## Installation

```
pip install jamtool
```

To run the test suite:

```
pip install "jamtool[test]"
pytest
```

## Selecting dependencies

```python
from jamtool.cargo import ConfigMetadataDependencyConstraint
from jamtool.dependency import Dependency, Stack, get_dependencies_within_constraint

available = [
    Dependency(id="node", version="v18.1.0", sha256="abc", stacks=[Stack(id="io.buildpacks.stacks.jammy")]),
    Dependency(id="node", version="v18.2.0", sha256="def", stacks=[Stack(id="io.buildpacks.stacks.jammy")]),
]
constraint = ConfigMetadataDependencyConstraint(constraint="18.*", id="node", patches=1)

selected = get_dependencies_within_constraint(available, constraint, "Node Engine")
# -> one ConfigMetadataDependency, version "18.2.0", name "Node Engine"
```

Results come lowest version first and hold at most `patches` entries. A
leading `v` is dropped from the version.

`get_cargo_dependencies_within_constraint(dependencies, constraint)` does the
same for `ConfigMetadataDependency` entries. All stack variants of one
version count as a single patch, and an entry whose stacks repeat those of
an earlier entry with the same version is dropped.

`find_dependency_name(dependency_id, config)` returns the `name` of the
matching dependency in a `Config`, or `""` if there is none.

## Caching dependencies

```python
from jamtool.dependency_cacher import DependencyCacher
from jamtool.logger import Logger

cacher = DependencyCacher(downloader, Logger())
cached = cacher.cache("/path/to/build/root", selected)
```

`downloader` is any object with a `drop(root, uri)` method that returns a
readable binary stream (the `Downloader` protocol). Each download is checked
against the dependency's `checksum`, or its `sha256` when there is no
checksum, written to `<root>/dependencies/<hash>`, and returned as a copy
whose `uri` is `file:///dependencies/<hash>`. Every failure – the directory
cannot be made, the download fails, no checksum is given, the file cannot be
written or the checksum does not match – raises `DependencyCacheError`.

`Logger(stream)` writes to `stream`, or to standard output when none is
given; `process`, `subprocess` and `action` indent by two, four and six
spaces, and `break_line` writes an empty line.

## Bundling files

```python
from jamtool.file_bundler import FileBundler

files = FileBundler().bundle("path/to/buildpack", ["bin/build", "bin/detect", "buildpack.toml"], config)
```

Each result is a `BundledFile` with a `name`, a `FileInfo` (`name`, `size`,
`mode`, `mtime`, plus `is_dir`, `is_symlink` and `permissions`), and either an
open binary `reader` or, for a symlink, a `link` relative to the root.
`buildpack.toml` is not read from disk: it is encoded from `config` with mode
`0644`. A file that cannot be stat'ed, opened or read as a link raises
`BundleError`.

## Formatting metadata

```python
import sys
from jamtool.formatter import BuildpackMetadata, Formatter

Formatter(sys.stdout).markdown([BuildpackMetadata(config=config, sha256="sha256:...")])
Formatter(sys.stdout).json([BuildpackMetadata(config=config)])
```

The Markdown output lists supported stacks, default dependency versions and
dependencies (grouped by id, version and checksum). When several entries are
given, the one with an `order` becomes the language-family buildpackage and
the others are listed as the buildpackages it includes. `json` writes one
line with a `buildpackage` object and, for a family, a `children` list. Both
raise `ValueError` when given no entries.

## What this package does not do

It is a library only: it has no command-line program, provides no
downloader of its own, and does not build, archive or publish buildpack
images.