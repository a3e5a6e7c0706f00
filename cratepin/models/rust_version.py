"""
Simplified representation of a crate's ``package.rust-version``.

``rust-version`` is a subset of the version requirement syntax: a single
caret comparator with no prerelease, such as ``1.32`` or ``1.70.0``.  The
resolver uses it as a ceiling: a published version whose declared minimum
toolchain is newer than the caller's toolchain is never selected.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar

from semantic_version import Version

from cratepin.exceptions import InvalidToolchainSpecError, InvalidVersionReqError
from cratepin.models.version_req import U64_MAX, Op, VersionReq


@dataclass(frozen=True, order=True)
class RustVersion:
    """A ``major.minor.patch`` toolchain version, ordered lexicographically.

    Attributes:
        major: Major toolchain version.
        minor: Minor toolchain version (``0`` when omitted).
        patch: Patch toolchain version (``0`` when omitted).
    """

    MIN: ClassVar["RustVersion"]
    MAX: ClassVar["RustVersion"]

    major: int
    minor: int = 0
    patch: int = 0

    @classmethod
    def parse(cls, text: str) -> "RustVersion":
        """Parse a ``rust-version`` value.

        Args:
            text: A single caret comparator without prerelease, e.g.
                ``"1.32"``.

        Returns:
            The parsed :class:`RustVersion`.

        Raises:
            InvalidToolchainSpecError: *text* is not a valid requirement,
                has more than one comparator, uses an operator other than
                caret, or carries a prerelease tag.

        Example::

            >>> RustVersion.parse("1.32")
            RustVersion(major=1, minor=32, patch=0)
        """
        try:
            version_req = VersionReq.parse(text)
        except InvalidVersionReqError as exc:
            raise InvalidToolchainSpecError(text, reason=exc.reason) from exc

        if len(version_req.comparators) != 1:
            raise InvalidToolchainSpecError(text, reason="expected one comparator")

        comparator = version_req.comparators[0]
        if comparator.op is not Op.CARET:
            raise InvalidToolchainSpecError(
                text, reason=f"unsupported operator {comparator.op.value!r}"
            )
        if comparator.pre:
            raise InvalidToolchainSpecError(text, reason="prerelease not allowed")

        return cls(
            major=comparator.major,
            minor=comparator.minor or 0,
            patch=comparator.patch or 0,
        )

    @classmethod
    def from_version(cls, version: Version) -> "RustVersion":
        """Project a full semantic version onto its release triple."""
        return cls(major=version.major, minor=version.minor, patch=version.patch)

    def __str__(self) -> str:
        return f"{self.major}.{self.minor}.{self.patch}"


RustVersion.MIN = RustVersion(1, 0, 0)
RustVersion.MAX = RustVersion(U64_MAX, U64_MAX, U64_MAX)
