"""Exceptions raised by zxlite.

Every :class:`ZXError` is raised before the diagram is touched, so catching one
leaves the diagram exactly as it was. :class:`InvariantError` signals a bug in
the engine itself and is not meant to be caught.
"""


class ZXError(Exception):
    """Base class for errors reported to the caller."""


class NotFoundError(ZXError, KeyError):
    """A vertex or edge that does not exist was referenced."""

    def __str__(self) -> str:
        # KeyError quotes its argument, which makes messages unreadable
        return str(self.args[0]) if self.args else ""


class InvalidArgumentError(ZXError, ValueError):
    """An argument was out of range or a payload was malformed."""


class PhaseParseError(InvalidArgumentError):
    """A phase string was not of the form ``N`` or ``N/D``."""


class InvariantError(RuntimeError):
    """The diagram broke one of its own invariants."""
