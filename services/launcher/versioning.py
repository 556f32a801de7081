"""Three-component release versions and helpers for describing changes."""

from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar

from packaging.version import InvalidVersion
from packaging.version import Version as _PackagingVersion


__all__ = [
    "Version",
    "VersionParseError",
    "ZERO_VERSION",
    "describe_change",
]


class VersionParseError(ValueError):
    """Raised when a version component is not a non-negative integer."""


@dataclass(frozen=True)
class Version:
    """Immutable ``major.minor.patch`` triple.

    Versions are only compared for difference and have no ordering. An older
    remote release is installed just like a newer one.
    """

    major: int = 0
    minor: int = 0
    patch: int = 0

    ZERO: ClassVar["Version"]

    def __post_init__(self) -> None:
        for name in ("major", "minor", "patch"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int) or value < 0:
                raise VersionParseError(
                    f"Version {name} must be a non-negative integer, got {value!r}"
                )

    @classmethod
    def parse(cls, text: str) -> "Version":
        """Parse ``text`` of the form ``"1.4.2"``.

        Text that does not split into exactly three components yields
        :data:`ZERO_VERSION`. A component that is not an integer raises
        :class:`VersionParseError`.
        """

        parts = text.split(".")
        if len(parts) != 3:
            return cls.ZERO
        try:
            major, minor, patch = (int(part) for part in parts)
        except ValueError as exc:
            raise VersionParseError(f"Invalid version text: {text!r}") from exc
        return cls(major, minor, patch)

    def format(self) -> str:
        return f"{self.major}.{self.minor}.{self.patch}"

    def differs_from(self, other: "Version") -> bool:
        return (
            self.major != other.major
            or self.minor != other.minor
            or self.patch != other.patch
        )

    def __str__(self) -> str:
        return self.format()


Version.ZERO = Version(0, 0, 0)
ZERO_VERSION = Version.ZERO


def describe_change(local: Version | None, remote: Version) -> str:
    """Return ``"install"``, ``"upgrade"``, ``"downgrade"`` or ``"reinstall"``.

    Only used to make log messages readable; the installer treats every
    difference the same way.
    """

    if local is None:
        return "install"
    try:
        local_parsed = _PackagingVersion(local.format())
        remote_parsed = _PackagingVersion(remote.format())
    except InvalidVersion:  # pragma: no cover - formatted triples always parse
        return "reinstall"
    if remote_parsed > local_parsed:
        return "upgrade"
    if remote_parsed < local_parsed:
        return "downgrade"
    return "reinstall"
