"""Custom exceptions for quillpress."""

from typing import Optional


class QuillPressError(Exception):
    """Base exception for quillpress errors."""

    def __init__(self, message: str, details: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.details = details

    def __str__(self) -> str:
        if self.details:
            return f"{self.message}: {self.details}"
        return self.message


class ModelError(QuillPressError):
    """Raised when a content node violates a structural invariant on construction."""

    pass


class StyleError(QuillPressError):
    """Raised for invalid style sheet records (text styles, element styles, page masters)."""

    pass


class ParsingError(QuillPressError):
    """Exception raised while reading document or style sheet input."""

    pass


class RenderingError(QuillPressError):
    """Exception raised during document rendering."""

    pass
