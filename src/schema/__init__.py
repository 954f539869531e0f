"""Schema Model: ordered field sequence and its editing operations.

Example usage:
    >>> from src.schema import FormSchema
    >>> schema = FormSchema()
    >>> field = schema.append("SHORT_TEXT")
    >>> schema.reorder(field.id, field.id)
    False
"""

from .lib import FormSchema, SchemaError, array_move

__all__ = [
    "FormSchema",
    "SchemaError",
    "array_move",
]
