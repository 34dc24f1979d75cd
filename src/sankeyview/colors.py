"""Light/dark color pairs.

Every color option carries one value per appearance. The active scheme picks
which one ends up in the rendered document.
"""

from __future__ import annotations

import re
from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum
from typing import Any, Tuple, Union

from sankeyview.exceptions import InvalidColorError, InvalidOptionError

_HEX_RE = re.compile(r"^#?([0-9a-fA-F]{3}|[0-9a-fA-F]{6}|[0-9a-fA-F]{8})$")


class ColorScheme(Enum):
    """System appearance used to pick one side of each ColorPair."""

    LIGHT = "light"
    DARK = "dark"

    @classmethod
    def coerce(cls, value: ColorScheme | str) -> ColorScheme:
        if isinstance(value, ColorScheme):
            return value
        if isinstance(value, str):
            try:
                return cls(value.strip().lower())
            except ValueError:
                pass
        raise InvalidOptionError("color_scheme", value, "expected 'light' or 'dark'")

    @property
    def is_dark(self) -> bool:
        return self is ColorScheme.DARK


def normalize_hex(value: Any) -> str:
    """Normalize a hex color to lower-case ``#rrggbb`` or ``#rrggbbaa``.

    Short ``#rgb`` forms are expanded. The leading ``#`` is optional.

    Raises:
        InvalidColorError: If value is not a hex color string.
    """
    if not isinstance(value, str):
        raise InvalidColorError(value)
    match = _HEX_RE.match(value.strip())
    if match is None:
        raise InvalidColorError(value)
    digits = match.group(1).lower()
    if len(digits) == 3:
        digits = "".join(ch * 2 for ch in digits)
    return f"#{digits}"


@dataclass(frozen=True)
class ColorPair:
    """A color with one value for light appearance and one for dark.

    Attributes:
        light: Hex color used with ColorScheme.LIGHT
        dark: Hex color used with ColorScheme.DARK
    """

    light: str
    dark: str

    def __post_init__(self) -> None:
        object.__setattr__(self, "light", normalize_hex(self.light))
        object.__setattr__(self, "dark", normalize_hex(self.dark))

    @classmethod
    def of(cls, color: str) -> ColorPair:
        """Use the same color in both schemes."""
        return cls(color, color)

    @classmethod
    def coerce(cls, value: ColorLike) -> ColorPair:
        """Build a ColorPair from the loose forms accepted by the public API.

        Accepts a ColorPair, a single hex string, a ``(light, dark)`` sequence,
        or a mapping with ``light`` and ``dark`` keys.
        """
        if isinstance(value, ColorPair):
            return value
        if isinstance(value, str):
            return cls.of(value)
        if isinstance(value, Mapping):
            if "light" not in value or "dark" not in value:
                raise InvalidColorError(value, f"Color mapping {dict(value)!r} needs 'light' and 'dark' keys")
            return cls(value["light"], value["dark"])
        if isinstance(value, (tuple, list)) and len(value) == 2:
            return cls(value[0], value[1])
        raise InvalidColorError(value)

    def for_scheme(self, scheme: ColorScheme | str) -> str:
        return self.dark if ColorScheme.coerce(scheme).is_dark else self.light

    def to_dict(self) -> dict[str, str]:
        return {"light": self.light, "dark": self.dark}


ColorLike = Union[ColorPair, str, Tuple[str, str], Mapping[str, str]]
