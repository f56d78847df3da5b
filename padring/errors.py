"""
Padring Errors

Every failure in the padring flow is fatal: a ring is either complete and
closed or it is not written at all. All errors derive from PadringError so
the CLI can report them uniformly.
"""

from typing import Optional


class PadringError(Exception):
    """Base class for all padring failures."""
    pass


class ConfigParseError(PadringError):
    """Malformed configuration or cell library input."""

    def __init__(self, message: str, source: Optional[str] = None,
                 line: Optional[int] = None):
        self.message = message
        self.source = source
        self.line = line
        where = ""
        if source is not None:
            where = f"{source}:{line}: " if line is not None else f"{source}: "
        super().__init__(f"{where}{message}")


class MissingDieGeometry(PadringError):
    """Die width or height was not specified or is not positive."""
    pass


class NoFillersAvailable(PadringError):
    """The filler registry is empty before layout starts."""
    pass


class LayoutOverflow(PadringError):
    """Content of a side does not fit (or does not close) the die extent."""

    def __init__(self, side: str, required: float, available: float,
                 message: Optional[str] = None):
        self.side = side
        self.required = required
        self.available = available
        super().__init__(
            message or
            f"({side}) items need {required:g} microns but the die extent is {available:g}"
        )


class NoFillerFits(PadringError):
    """A reserved gap cannot be closed with the registered filler cells."""

    def __init__(self, side: str, remaining: float):
        self.side = side
        self.remaining = remaining
        super().__init__(
            f"({side}) cannot find filler cell that fits remaining width {remaining:g}"
        )


class UnknownCellReference(PadringError):
    """A directive or filler name refers to a cell missing from the library."""

    def __init__(self, name: str, context: str = ""):
        self.name = name
        suffix = f" ({context})" if context else ""
        super().__init__(f"Cell '{name}' not found in the cell library{suffix}")
