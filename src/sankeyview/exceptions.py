"""Exceptions raised while building Sankey documents."""

from __future__ import annotations


class SankeyDataError(ValueError):
    """Diagram data could not be parsed.

    Raised by ``SankeyData.from_dict`` / ``from_json`` when the payload is
    missing required fields. Link endpoints are not checked here; use
    ``SankeyData.find_issues`` for that.

    Attributes:
        message: Human-readable error message
        path: Location of the offending value, e.g. ``links[3].value``
    """

    def __init__(self, message: str, *, path: str | None = None) -> None:
        self.path = path
        self.message = f"{path}: {message}" if path else message
        super().__init__(self.message)


class InvalidColorError(ValueError):
    """A color value is not a recognizable hex string.

    Attributes:
        value: The rejected value
        message: Human-readable error message
    """

    def __init__(self, value: object, message: str | None = None) -> None:
        self.value = value
        self.message = message or self._default_message()
        super().__init__(self.message)

    def _default_message(self) -> str:
        return (
            f"Invalid color {self.value!r}. "
            "Expected a hex string like '#1e293b', '#fff' or '#1e293bcc'."
        )


class InvalidOptionError(ValueError):
    """A render option is out of range or of the wrong kind.

    Attributes:
        option: Name of the option
        value: The rejected value
        message: Human-readable error message
    """

    def __init__(self, option: str, value: object, reason: str) -> None:
        self.option = option
        self.value = value
        self.message = f"Invalid value {value!r} for '{option}': {reason}"
        super().__init__(self.message)


class MissingAssetsError(RuntimeError):
    """The vendored JavaScript libraries could not be found.

    Attributes:
        missing: Names of the asset files that were not found
        location: Where they were looked up
    """

    def __init__(self, missing: list[str], location: str) -> None:
        self.missing = missing
        self.location = location
        self.message = (
            f"Missing bundled visualization assets: {missing} (looked in {location}). "
            "Vendor d3.min.js and d3-sankey.min.js into that location, "
            "or render with LibrarySources.cdn()."
        )
        super().__init__(self.message)
