"""
Version requirement model for cratepin.

Implements the requirement syntax used in Cargo manifests on top of
:class:`semantic_version.Version`.  ``semantic_version`` ships its own
``SimpleSpec``/``NpmSpec`` classes, but neither follows Cargo's rules for
bare versions (``"1.2"`` means ``^1.2``) or for prerelease matching, so
comparators are parsed and evaluated here.

Supported forms::

    1.2.3   ^1.2.3   ~1.2   =1.2.3   >=1.0, <2.0   1.*   1.2.x   *

A prerelease version only satisfies a requirement when one of its
comparators names the same ``major.minor.patch`` with a prerelease tag,
e.g. ``1.0.0-beta.2`` matches ``>=1.0.0-beta.1`` but not ``>=0.9``.
"""

from __future__ import annotations

import re
from enum import Enum
from dataclasses import dataclass
from typing import Any, Optional, Sequence, Tuple, Union

from semantic_version import Version

from cratepin.exceptions import InvalidVersionReqError


class Op(Enum):
    """Comparison operator of a single comparator."""

    EXACT = "="
    GREATER = ">"
    GREATER_EQ = ">="
    LESS = "<"
    LESS_EQ = "<="
    TILDE = "~"
    CARET = "^"
    WILDCARD = "*"


_WILDCARDS = ("*", "x", "X")

#: Largest version component the registry accepts.
U64_MAX = 2**64 - 1

_COMPARATOR_RE = re.compile(
    r"""
    ^(?P<op>>=|<=|=|>|<|~|\^)?\s*
    (?P<major>\d+|[*xX])
    (?:\.(?P<minor>\d+|[*xX]))?
    (?:\.(?P<patch>\d+|[*xX]))?
    (?:-(?P<pre>[0-9A-Za-z-]+(?:\.[0-9A-Za-z-]+)*))?
    $
    """,
    re.VERBOSE,
)


def _prerelease_key(pre: Sequence[str]) -> Tuple[Any, ...]:
    """Sort key for prerelease identifiers following semver precedence.

    An empty prerelease (a release) sorts above every prerelease; numeric
    identifiers sort below alphanumeric ones.
    """
    if not pre:
        return (1,)
    return (
        0,
        tuple((0, int(part), "") if part.isdigit() else (1, 0, part) for part in pre),
    )


@dataclass(frozen=True)
class Comparator:
    """One ``op major[.minor[.patch]][-pre]`` clause of a requirement.

    ``minor`` and ``patch`` are ``None`` when omitted (or wildcarded).
    """

    op: Op
    major: int
    minor: Optional[int] = None
    patch: Optional[int] = None
    pre: Tuple[str, ...] = ()

    def matches(self, version: Version) -> bool:
        """Return ``True`` if *version* satisfies this comparator alone."""
        if self.op in (Op.EXACT, Op.WILDCARD):
            return self._matches_exact(version)
        if self.op is Op.GREATER:
            return self._matches_greater(version)
        if self.op is Op.GREATER_EQ:
            return self._matches_exact(version) or self._matches_greater(version)
        if self.op is Op.LESS:
            return self._matches_less(version)
        if self.op is Op.LESS_EQ:
            return self._matches_exact(version) or self._matches_less(version)
        if self.op is Op.TILDE:
            return self._matches_tilde(version)
        return self._matches_caret(version)

    def allows_prerelease_of(self, version: Version) -> bool:
        """Whether this comparator opts *version*'s release line into prereleases."""
        return (
            bool(self.pre)
            and self.major == version.major
            and self.minor == version.minor
            and self.patch == version.patch
        )

    # ------------------------------------------------------------------
    # Operator semantics
    # ------------------------------------------------------------------

    def _pre_cmp(self, version: Version) -> int:
        ours = _prerelease_key(self.pre)
        theirs = _prerelease_key(version.prerelease)
        return (theirs > ours) - (theirs < ours)

    def _matches_exact(self, version: Version) -> bool:
        if version.major != self.major:
            return False
        if self.minor is None:
            return True
        if version.minor != self.minor:
            return False
        if self.patch is None:
            return True
        if version.patch != self.patch:
            return False
        return self._pre_cmp(version) == 0

    def _matches_greater(self, version: Version) -> bool:
        if version.major != self.major:
            return version.major > self.major
        if self.minor is None:
            return False
        if version.minor != self.minor:
            return version.minor > self.minor
        if self.patch is None:
            return False
        if version.patch != self.patch:
            return version.patch > self.patch
        return self._pre_cmp(version) > 0

    def _matches_less(self, version: Version) -> bool:
        if version.major != self.major:
            return version.major < self.major
        if self.minor is None:
            return False
        if version.minor != self.minor:
            return version.minor < self.minor
        if self.patch is None:
            return False
        if version.patch != self.patch:
            return version.patch < self.patch
        return self._pre_cmp(version) < 0

    def _matches_tilde(self, version: Version) -> bool:
        if version.major != self.major:
            return False
        if self.minor is not None and version.minor != self.minor:
            return False
        if self.patch is not None and version.patch != self.patch:
            return version.patch > self.patch
        return self._pre_cmp(version) >= 0

    def _matches_caret(self, version: Version) -> bool:
        if version.major != self.major:
            return False
        if self.minor is None:
            return True
        if self.patch is None:
            if self.major > 0:
                return version.minor >= self.minor
            return version.minor == self.minor

        if self.major > 0:
            if version.minor != self.minor:
                return version.minor > self.minor
            if version.patch != self.patch:
                return version.patch > self.patch
        elif self.minor > 0:
            if version.minor != self.minor:
                return False
            if version.patch != self.patch:
                return version.patch > self.patch
        elif version.minor != self.minor or version.patch != self.patch:
            return False

        return self._pre_cmp(version) >= 0

    def __str__(self) -> str:
        parts = [str(self.major)]
        if self.op is Op.WILDCARD:
            parts.append(str(self.minor) if self.minor is not None else "*")
            if self.minor is not None:
                parts.append("*")
            return ".".join(parts)

        if self.minor is not None:
            parts.append(str(self.minor))
        if self.patch is not None:
            parts.append(str(self.patch))
        text = ".".join(parts)
        if self.pre:
            text += "-" + ".".join(self.pre)
        return f"{self.op.value}{text}"


@dataclass(frozen=True)
class VersionReq:
    """A comma-separated set of comparators; all must match.

    An empty comparator tuple is the ``*`` requirement, which matches every
    release but no prerelease.
    """

    comparators: Tuple[Comparator, ...] = ()

    @classmethod
    def parse(cls, text: str) -> "VersionReq":
        """Parse a requirement string.

        Args:
            text: Requirement such as ``"1.2"``, ``">=1.0, <2"`` or ``"1.*"``.

        Returns:
            The parsed :class:`VersionReq`.

        Raises:
            InvalidVersionReqError: *text* is not a valid requirement.

        Example::

            >>> VersionReq.parse("1.32").comparators[0].op
            <Op.CARET: '^'>
        """
        stripped = text.strip()
        if not stripped:
            raise InvalidVersionReqError(text, "empty requirement")

        if stripped in _WILDCARDS:
            return cls()

        comparators = []
        for chunk in stripped.split(","):
            chunk = chunk.strip()
            if not chunk:
                raise InvalidVersionReqError(text, "empty comparator")
            comparators.append(_parse_comparator(chunk, text))

        return cls(tuple(comparators))

    def matches(self, version: Union[Version, str]) -> bool:
        """Return ``True`` if *version* satisfies every comparator."""
        if isinstance(version, str):
            version = Version(version)

        if not all(comparator.matches(version) for comparator in self.comparators):
            return False

        if not version.prerelease:
            return True

        return any(c.allows_prerelease_of(version) for c in self.comparators)

    def __contains__(self, version: Union[Version, str]) -> bool:
        return self.matches(version)

    def __str__(self) -> str:
        if not self.comparators:
            return "*"
        return ", ".join(str(c) for c in self.comparators)


VersionReq.STAR = VersionReq()  # type: ignore[attr-defined]


def _parse_number(value: str, requirement: str, position: str) -> int:
    if len(value) > 1 and value.startswith("0"):
        raise InvalidVersionReqError(
            requirement, f"invalid leading zero in {position} version number"
        )
    number = int(value)
    if number > U64_MAX:
        raise InvalidVersionReqError(
            requirement, f"value of {position} version number exceeds u64::MAX"
        )
    return number


def _parse_comparator(chunk: str, requirement: str) -> Comparator:
    """Parse one comparator of *requirement*."""
    match = _COMPARATOR_RE.match(chunk)
    if match is None:
        raise InvalidVersionReqError(requirement, f"unexpected comparator {chunk!r}")

    op_text = match.group("op")
    major_text = match.group("major")
    minor_text = match.group("minor")
    patch_text = match.group("patch")
    pre_text = match.group("pre")

    if major_text in _WILDCARDS:
        raise InvalidVersionReqError(
            requirement, "wildcard major version must stand alone"
        )
    major = _parse_number(major_text, requirement, "major")

    wildcard = minor_text in _WILDCARDS or patch_text in _WILDCARDS
    if wildcard:
        if op_text not in (None, "="):
            raise InvalidVersionReqError(
                requirement, f"unexpected wildcard after operator {op_text!r}"
            )
        if minor_text in _WILDCARDS and patch_text not in (None,) + _WILDCARDS:
            raise InvalidVersionReqError(
                requirement, "unexpected version number after wildcard"
            )
        if pre_text is not None:
            raise InvalidVersionReqError(
                requirement, "unexpected prerelease after wildcard"
            )
        minor = (
            None
            if minor_text in _WILDCARDS
            else _parse_number(minor_text, requirement, "minor")
        )
        return Comparator(op=Op.WILDCARD, major=major, minor=minor)

    minor = (
        _parse_number(minor_text, requirement, "minor")
        if minor_text is not None
        else None
    )
    patch = (
        _parse_number(patch_text, requirement, "patch")
        if patch_text is not None
        else None
    )

    pre: Tuple[str, ...] = ()
    if pre_text is not None:
        if patch is None:
            raise InvalidVersionReqError(
                requirement, "prerelease requires a full major.minor.patch version"
            )
        pre = tuple(pre_text.split("."))
        for part in pre:
            if part.isdigit() and len(part) > 1 and part.startswith("0"):
                raise InvalidVersionReqError(
                    requirement, "invalid leading zero in prerelease identifier"
                )

    op = Op(op_text) if op_text else Op.CARET
    return Comparator(op=op, major=major, minor=minor, patch=patch, pre=pre)
