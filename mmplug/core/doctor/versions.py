"""
Version parsing and comparison

Parsers turn raw text (command output, pin files, go.mod directives) into
`v`-prefixed version strings. Comparators order those strings with
packaging's Version:

- at_least: installed >= required (toolchain minimum)
- major_minor_equal: same major and minor, patch ignored (runtime pin)

Shorthand versions (v18, v1.19) are valid; missing segments count as zero.
Go release names (v1.21rc1) sort before the release they precede.
"""

import re

from packaging.version import InvalidVersion, Version

from .errors import ComparisonError, VersionParseError

VERSION_PREFIX = "v"

# vMAJOR[.MINOR[.PATCH]][-prerelease | goprerelease][+build], no leading zeros
VERSION_PATTERN = re.compile(
    r"^v(?P<release>(?:0|[1-9]\d*)(?:\.(?:0|[1-9]\d*))?(?P<patch>\.(?:0|[1-9]\d*))?)"
    r"(?:-(?P<pre>[0-9A-Za-z\-]+(?:\.[0-9A-Za-z\-]+)*)|(?P<gopre>[a-z]+\d+))?"
    r"(?:\+(?P<build>[0-9A-Za-z\-]+(?:\.[0-9A-Za-z\-]+)*))?$"
)


def with_prefix(version: str) -> str:
    """Prepend the `v` prefix unless already present"""
    if version.startswith(VERSION_PREFIX):
        return version
    return VERSION_PREFIX + version


def parse_version(value: str) -> Version:
    """
    Parse a `v`-prefixed version. Build metadata is dropped.

    Raises:
        ComparisonError: If the value is not a valid version
    """
    match = VERSION_PATTERN.match(value or "")
    if not match:
        raise ComparisonError(value)
    if match.group("patch") is None and (match.group("pre") or match.group("build")):
        # Shorthand versions take no semver suffix
        raise ComparisonError(value)

    text = match.group("release")
    if match.group("pre"):
        text += "-" + match.group("pre")
    elif match.group("gopre"):
        text += match.group("gopre")

    try:
        return Version(text)
    except InvalidVersion as e:
        raise ComparisonError(value) from e


def at_least(installed: str, required: str) -> bool:
    """True iff installed >= required"""
    return parse_version(installed) >= parse_version(required)


def major_minor_equal(installed: str, required: str) -> bool:
    """
    True iff installed and required share major and minor.

    A requirement without a minor segment (v18) pins the major line only.
    """
    have = parse_version(installed)
    want = parse_version(required)
    if len(want.release) < 2:
        return have.major == want.major
    return have.release[:2] == want.release[:2]


# ============================================
# Parsers for raw text
# ============================================

def parse_toolchain_output(raw: str, prefix: str = "go") -> str:
    """
    Extract the version from toolchain version output.

    `go version go1.19.5 linux/amd64` -> `1.19.5`

    Raises:
        VersionParseError: Fewer than 3 tokens or the prefix is missing
    """
    words = raw.split()
    if len(words) < 3:
        raise VersionParseError(
            f"expected at least 3 words in version output, got {len(words)}: {raw.strip()!r}"
        )
    token = words[2]
    if not token.startswith(prefix) or len(token) == len(prefix):
        raise VersionParseError(
            f"version token {token!r} does not start with {prefix!r}"
        )
    return token[len(prefix):]


def parse_pin(raw: str) -> str:
    """
    Normalize pinned version file contents.

    Raises:
        VersionParseError: If the file is empty after trimming
    """
    version = raw.strip()
    if not version:
        raise VersionParseError("pinned version file is empty")
    return with_prefix(version)


def parse_runtime_output(raw: str) -> str:
    """Normalize runtime `-v` output (`v18.2.0`)"""
    version = raw.strip()
    if not version:
        raise VersionParseError("version command printed nothing")
    return with_prefix(version.split()[0])
