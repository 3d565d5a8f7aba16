"""Module and package versions.

Version: 0.2.0

Implements the dotted ``major.minor.micro.qualifier`` versions used by
bundle manifests and the interval syntax used in ``Import-Package`` version
ranges (``[1.0,2.0)``, ``(1.0,2.0]``, or a bare ``1.0`` meaning "1.0 and up").
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Optional, Union

from bundleconsole.core.exceptions import VersionFormatError

_NUMBER_RE = re.compile(r"^[0-9]+$")
_QUALIFIER_RE = re.compile(r"^[A-Za-z0-9_-]*$")


@dataclass(frozen=True, order=True)
class Version:
    """A comparable ``major.minor.micro.qualifier`` version."""

    major: int = 0
    minor: int = 0
    micro: int = 0
    qualifier: str = ""

    @classmethod
    def parse(cls, text: Union[str, "Version", None]) -> "Version":
        """Parse a version string; missing parts default to zero.

        Raises:
            VersionFormatError: If a numeric part is not a non-negative
                integer or the qualifier has illegal characters.
        """
        if isinstance(text, Version):
            return text
        if text is None:
            return EMPTY_VERSION
        text = text.strip()
        if not text:
            return EMPTY_VERSION

        parts = text.split(".", 3)
        numbers = []
        for part in parts[:3]:
            if not _NUMBER_RE.match(part):
                raise VersionFormatError(f"Invalid version component '{part}'", text)
            numbers.append(int(part))
        while len(numbers) < 3:
            numbers.append(0)

        qualifier = parts[3] if len(parts) == 4 else ""
        if not _QUALIFIER_RE.match(qualifier):
            raise VersionFormatError(f"Invalid version qualifier '{qualifier}'", text)

        return cls(numbers[0], numbers[1], numbers[2], qualifier)

    def __str__(self) -> str:
        base = f"{self.major}.{self.minor}.{self.micro}"
        if self.qualifier:
            return f"{base}.{self.qualifier}"
        return base


EMPTY_VERSION = Version()


@dataclass(frozen=True)
class VersionRange:
    """An interval of versions.

    ``ceiling`` of None means the range is unbounded above, which is what a
    bare version such as ``"1.2"`` denotes.
    """

    floor: Version = EMPTY_VERSION
    floor_inclusive: bool = True
    ceiling: Optional[Version] = None
    ceiling_inclusive: bool = False

    @classmethod
    def parse(cls, text: Optional[str]) -> "VersionRange":
        """Parse ``[a,b)``-style intervals or a bare minimum version."""
        if text is None or not text.strip():
            return cls()
        text = text.strip()

        if text[0] not in "[(":
            return cls(floor=Version.parse(text))

        if text[-1] not in "])" or "," not in text:
            raise VersionFormatError("Invalid version range", text)

        low, _, high = text[1:-1].partition(",")
        if not low.strip() or not high.strip():
            raise VersionFormatError("Version range needs both endpoints", text)

        floor = Version.parse(low)
        ceiling = Version.parse(high)
        if floor > ceiling:
            raise VersionFormatError("Version range floor is above its ceiling", text)

        return cls(
            floor=floor,
            floor_inclusive=text[0] == "[",
            ceiling=ceiling,
            ceiling_inclusive=text[-1] == "]",
        )

    def contains(self, version: Union[str, Version]) -> bool:
        version = Version.parse(version)

        if self.floor_inclusive:
            if version < self.floor:
                return False
        elif version <= self.floor:
            return False

        if self.ceiling is None:
            return True
        if self.ceiling_inclusive:
            return version <= self.ceiling
        return version < self.ceiling

    def __contains__(self, version: Union[str, Version]) -> bool:
        return self.contains(version)

    def __str__(self) -> str:
        if self.ceiling is None:
            return str(self.floor)
        left = "[" if self.floor_inclusive else "("
        right = "]" if self.ceiling_inclusive else ")"
        return f"{left}{self.floor},{self.ceiling}{right}"
