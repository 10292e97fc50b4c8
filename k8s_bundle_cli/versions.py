"""Semantic version parsing for Kubernetes version annotations.

Structure:
    major.minor.patch[-prerelease][+buildmetadata]

Two entry points:
- parse_version(): strict semver, all three numeric components required.
- parse_tolerant(): accepts what bundle authors actually write in
  annotations, e.g. "1.22", "v1.21.0", " 1.021 ", and normalizes it.

Both raise InvalidVersionError on failure. The error's ``reason`` is the
short parser message quoted back in validation diagnostics.

Examples:
    >>> parse_tolerant("1.22")
    KubeVersion(major=1, minor=22, patch=0, prerelease=(), build=())
    >>> str(parse_tolerant("v1.21.3-rc.1"))
    '1.21.3-rc.1'
    >>> parse_tolerant("1.21.0") < parse_tolerant("1.22")
    True
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from functools import total_ordering

from k8s_bundle_cli.errors import InvalidVersionError

_NUMBERS = re.compile(r"[0-9]+")
_ALPHANUM = re.compile(r"[0-9A-Za-z-]+")

# Numeric components are unsigned 64-bit integers
_MAX_NUMBER = 2**64 - 1


@total_ordering
@dataclass(frozen=True)
class KubeVersion:
    """A parsed semantic version.

    Ordering follows semver precedence: major, minor, patch, then
    pre-release identifiers (a pre-release sorts before its release).
    Build metadata never takes part in ordering or equality.

    Attributes:
        major: Major version number.
        minor: Minor version number.
        patch: Patch version number.
        prerelease: Dot-separated pre-release identifiers.
        build: Dot-separated build metadata identifiers.
    """

    major: int
    minor: int
    patch: int
    prerelease: tuple[str, ...] = ()
    build: tuple[str, ...] = ()

    def __str__(self) -> str:
        text = f"{self.major}.{self.minor}.{self.patch}"
        if self.prerelease:
            text += "-" + ".".join(self.prerelease)
        if self.build:
            text += "+" + ".".join(self.build)
        return text

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, KubeVersion):
            return NotImplemented
        return _compare(self, other) == 0

    def __lt__(self, other: KubeVersion) -> bool:
        if not isinstance(other, KubeVersion):
            return NotImplemented
        return _compare(self, other) < 0

    def __hash__(self) -> int:
        return hash((self.major, self.minor, self.patch, self.prerelease))


def _compare_identifier(a: str, b: str) -> int:
    a_num = a.isdigit()
    b_num = b.isdigit()
    if a_num and b_num:
        return (int(a) > int(b)) - (int(a) < int(b))
    # Numeric identifiers have lower precedence than alphanumeric ones
    if a_num:
        return -1
    if b_num:
        return 1
    return (a > b) - (a < b)


def _compare(a: KubeVersion, b: KubeVersion) -> int:
    core_a = (a.major, a.minor, a.patch)
    core_b = (b.major, b.minor, b.patch)
    if core_a != core_b:
        return -1 if core_a < core_b else 1

    if not a.prerelease and not b.prerelease:
        return 0
    if not a.prerelease:
        return 1
    if not b.prerelease:
        return -1

    for ident_a, ident_b in zip(a.prerelease, b.prerelease):
        result = _compare_identifier(ident_a, ident_b)
        if result:
            return result
    return (len(a.prerelease) > len(b.prerelease)) - (len(a.prerelease) < len(b.prerelease))


def _parse_number(text: str, part: str, raw: str) -> int:
    if not _NUMBERS.fullmatch(text):
        raise InvalidVersionError(raw, f'Invalid character(s) found in {part} number "{text}"')
    if len(text) > 1 and text.startswith("0"):
        raise InvalidVersionError(
            raw, f'{part.capitalize()} number must not contain leading zeroes "{text}"'
        )
    return _bounded(text, raw)


def _bounded(text: str, raw: str) -> int:
    value = int(text)
    if value > _MAX_NUMBER:
        raise InvalidVersionError(raw, f'strconv.ParseUint: parsing "{text}": value out of range')
    return value


def _parse_prerelease(idents: list[str], raw: str) -> tuple[str, ...]:
    for ident in idents:
        if not ident:
            raise InvalidVersionError(raw, "Prerelease is empty")
        if _NUMBERS.fullmatch(ident):
            if len(ident) > 1 and ident.startswith("0"):
                raise InvalidVersionError(
                    raw, f'Numeric PreRelease version must not contain leading zeroes "{ident}"'
                )
            _bounded(ident, raw)
        elif not _ALPHANUM.fullmatch(ident):
            raise InvalidVersionError(raw, f'Invalid character(s) found in prerelease "{ident}"')
    return tuple(idents)


def _parse_build(idents: list[str], raw: str) -> tuple[str, ...]:
    for ident in idents:
        if not ident:
            raise InvalidVersionError(raw, "Build meta data is empty")
        if not _ALPHANUM.fullmatch(ident):
            raise InvalidVersionError(
                raw, f'Invalid character(s) found in build meta data "{ident}"'
            )
    return tuple(idents)


def parse_version(version_str: str, *, raw: str | None = None) -> KubeVersion:
    """Parse a strict semantic version string.

    Args:
        version_str: Version string such as "1.22.0" or "1.0.0-beta+exp.sha".
        raw: Original user input to report in errors (defaults to version_str).

    Returns:
        Parsed KubeVersion.

    Raises:
        InvalidVersionError: If the string is not a valid semantic version.
    """
    raw = version_str if raw is None else raw

    if not version_str:
        raise InvalidVersionError(raw, "Version string empty")

    parts = version_str.split(".", 2)
    if len(parts) != 3:
        raise InvalidVersionError(raw, "No Major.Minor.Patch elements found")

    major = _parse_number(parts[0], "major", raw)
    minor = _parse_number(parts[1], "minor", raw)

    patch_str = parts[2]
    build: tuple[str, ...] = ()
    prerelease: tuple[str, ...] = ()
    if "+" in patch_str:
        patch_str, build_str = patch_str.split("+", 1)
        build = _parse_build(build_str.split("."), raw)
    if "-" in patch_str:
        patch_str, pre_str = patch_str.split("-", 1)
        prerelease = _parse_prerelease(pre_str.split("."), raw)

    patch = _parse_number(patch_str, "patch", raw)

    return KubeVersion(major, minor, patch, prerelease, build)


def parse_tolerant(version_str: str) -> KubeVersion:
    """Parse a version string leniently.

    Accepts surrounding whitespace, a leading "v", leading zeros in numeric
    components, and a missing minor or patch component ("1.22" parses as
    1.22.0). A shortened version cannot carry pre-release or build data.

    Args:
        version_str: Version string as written by a user.

    Returns:
        Parsed KubeVersion.

    Raises:
        InvalidVersionError: If the string cannot be parsed even leniently.
    """
    text = version_str.strip()
    if text.startswith("v"):
        text = text[1:]

    parts = text.split(".", 2)
    parts = [p.lstrip("0") or "0" if _NUMBERS.fullmatch(p) else p for p in parts]

    if len(parts) < 3:
        if "+" in parts[-1] or "-" in parts[-1]:
            raise InvalidVersionError(
                version_str, "Short version cannot contain PreRelease/Build meta data"
            )
        while len(parts) < 3:
            parts.append("0")

    return parse_version(".".join(parts), raw=version_str)
