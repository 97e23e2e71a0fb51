from __future__ import annotations


class BlockDriverError(Exception):
    """Base class for every failure raised by blockdriver."""

    pass


class NotFound(BlockDriverError):
    """Raised when a category, block, menu item or element never shows up."""

    pass


class ResolutionError(BlockDriverError):
    """Raised when a block id, mutator, input or connection does not exist.

    The message carries the editor's own explanation when the lookup ran
    inside the page.
    """

    pass


class SessionError(BlockDriverError):
    """Raised when the remote browser cannot be started or is not usable."""

    pass


class EditorScriptError(SessionError):
    """Raised when a script evaluated in the page throws."""

    def __init__(self, message: str, *, expression: str = ""):
        super().__init__(message)
        self.expression = expression
