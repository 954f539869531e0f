"""Response payload model for filled-in forms."""

from .lib import NO_SELECTION, FormResponse, ResponseEntry

__all__ = [
    "NO_SELECTION",
    "ResponseEntry",
    "FormResponse",
]
