"""
Exceptions raised by the life plan simulator.

Input validation problems surface as ``ValueError`` (pydantic's
``ValidationError`` included) before any projection runs. The classes below
cover failures of store and state commands.
"""


class SimulatorError(Exception):
    """Base exception for simulator-related errors."""


class LineItemNotFoundError(SimulatorError):
    """Raised when a command references a line item id that does not exist."""

    def __init__(self, kind: str, book: str, item_id: str) -> None:
        self.kind = kind
        self.book = book
        self.item_id = item_id
        super().__init__(f"No {kind} item with id {item_id!r} in the {book} book")


class HorizonTooLongError(SimulatorError):
    """Raised when a household's horizon exceeds the configured maximum."""


class UnknownCommandError(SimulatorError):
    """Raised when a state command kind has no handler."""
