"""Semantic versions and version constraints."""

from __future__ import annotations

import functools
import re
from dataclasses import dataclass
from typing import Callable


class SemverError(ValueError):
    """Raised when a version or a constraint cannot be parsed."""


_IDENT = r"[0-9A-Za-z-]+(?:\.[0-9A-Za-z-]+)*"
_TAIL = rf"(?:-(?P<pre>{_IDENT}))?(?:\+(?P<meta>{_IDENT}))?"
_VERSION_RE = re.compile(rf"v?(?P<major>\d+)(?:\.(?P<minor>\d+))?(?:\.(?P<patch>\d+))?{_TAIL}")
_PART = r"(?:\d+|[xX*])"
_CVERSION = rf"v?{_PART}(?:\.{_PART}){{0,2}}(?:-{_IDENT})?(?:\+{_IDENT})?"
_TERM_RE = re.compile(rf"(=>|=<|>=|<=|!=|~>|[=<>~^])?\s*({_CVERSION})(?![0-9A-Za-z.*])")
_HYPHEN_RE = re.compile(rf"({_CVERSION})\s+-\s+({_CVERSION})")
_SEPARATORS_RE = re.compile(r"[\s,]*")


@functools.total_ordering
@dataclass(frozen=True, eq=False)
class Version:
    """A semantic version; build metadata does not take part in ordering."""

    major: int
    minor: int = 0
    patch: int = 0
    prerelease: str = ""
    metadata: str = ""

    @property
    def _key(self) -> tuple:
        pre = tuple((0, int(p), "") if p.isdigit() else (1, 0, p)
                    for p in self.prerelease.split(".")) if self.prerelease else ()
        return (self.major, self.minor, self.patch, not self.prerelease, pre)

    def __eq__(self, other: object) -> bool:
        return self._key == other._key if isinstance(other, Version) else NotImplemented

    def __lt__(self, other: object) -> bool:
        return self._key < other._key if isinstance(other, Version) else NotImplemented

    def __hash__(self) -> int:
        return hash(self._key)

    def __str__(self) -> str:
        text = f"{self.major}.{self.minor}.{self.patch}"
        text += f"-{self.prerelease}" if self.prerelease else ""
        return text + (f"+{self.metadata}" if self.metadata else "")


def parse_version(text: str) -> Version:
    """Parse a version such as ``v1.2.3``; missing minor or patch parts are zero."""
    match = _VERSION_RE.fullmatch(text)
    if match is None:
        raise SemverError("Invalid Semantic Version")
    return Version(int(match["major"]), int(match["minor"] or 0), int(match["patch"] or 0),
                   match["pre"] or "", match["meta"] or "")


def _parse_term(op: str, text: str) -> Callable[[Version], bool]:
    body, _, _ = text.lstrip("v").partition("+")
    body, _, pre = body.partition("-")
    numbers = []
    for part in body.split("."):
        if not part.isdigit():
            break
        numbers.append(int(part))
    n = len(numbers)
    base = Version(*numbers, prerelease=pre)
    major, minor, patch = base.major, base.minor, base.patch
    bump = {1: Version(major + 1), 2: Version(major, minor + 1)}.get(n)

    def in_range(v: Version) -> bool:
        return n == 0 or (v == base if n == 3 else base <= v < bump)

    def caret(v: Version) -> bool:
        if n == 0:
            return True
        if major > 0 or n == 1:
            return v < Version(major + 1)
        if minor > 0 or n == 2:
            return v < Version(0, minor + 1)
        return v < Version(0, 0, patch + 1)

    checks: dict[str, Callable[[Version], bool]] = {
        "": in_range,
        "=": in_range,
        "!=": lambda v: not in_range(v),
        ">": lambda v: v > base if n == 3 else n > 0 and v >= bump,
        ">=": lambda v: v >= base,
        "<": lambda v: v < base,
        "<=": lambda v: v <= base if n == 3 else n == 0 or v < bump,
        "~": lambda v: v >= base and (n == 0 or v < Version(major + 1 if n == 1 else major,
                                                            0 if n == 1 else minor + 1)),
        "^": lambda v: v >= base and caret(v),
    }
    aliases = {"=>": ">=", "=<": "<=", "~>": "~"}
    check = checks[aliases.get(op, op)]
    return lambda v: (not v.prerelease or bool(pre)) and check(v)


class Constraint:
    """A set of version ranges joined by ``||``; terms within a range must all hold."""

    def __init__(self, text: str) -> None:
        self.original = text
        self._groups = []
        for chunk in text.split("||"):
            chunk = _HYPHEN_RE.sub(r">= \1, <= \2", chunk)
            terms, position = [], 0
            for match in _TERM_RE.finditer(chunk):
                if not _SEPARATORS_RE.fullmatch(chunk[position:match.start()]):
                    raise SemverError(f"improper constraint: {text}")
                terms.append(_parse_term(match[1] or "", match[2]))
                position = match.end()
            if not terms or not _SEPARATORS_RE.fullmatch(chunk[position:]):
                raise SemverError(f"improper constraint: {text}")
            self._groups.append(terms)

    def check(self, version: Version | str) -> bool:
        """Report whether the version satisfies the constraint."""
        if isinstance(version, str):
            version = parse_version(version)
        return any(all(term(version) for term in group) for group in self._groups)


def parse_constraint(text: str) -> Constraint:
    """Parse a constraint such as ``>=1.2, <2`` or ``1.*``."""
    return Constraint(text)