# apps/consolidation/exceptions.py
"""
Exceptions raised by the consolidated order service layer.

Every error carries a machine-readable `code` and a `context` dict naming
the order, item and rule involved, so callers can show an actionable message.
Database errors (django.db.DatabaseError and subclasses) are not wrapped and
propagate to the caller unchanged.
"""


class ConsolidationError(Exception):
    """Base exception for consolidated order errors."""
    code = 'consolidation_error'

    def __init__(self, message, **context):
        super().__init__(message)
        self.message = message
        self.context = context

    def to_dict(self):
        return {
            'error': self.message,
            'code': self.code,
            'detail': {key: _jsonable(value) for key, value in self.context.items()},
        }


class InvalidArgument(ConsolidationError):
    """Raised for non-positive quantities and malformed or mismatched references."""
    code = 'invalid_argument'


class Forbidden(ConsolidationError):
    """Raised when the caller does not own the target order or item."""
    code = 'forbidden'


class NotFound(ConsolidationError):
    """Raised when the target order or item does not exist."""
    code = 'not_found'


class InvalidState(ConsolidationError):
    """Raised when an order is no longer a draft, or is empty at send time."""
    code = 'invalid_state'


class Conflict(ConsolidationError):
    """Raised when a second open draft is requested for the same supplier."""
    code = 'conflict'


def _jsonable(value):
    if isinstance(value, (str, int, float, bool)) or value is None:
        return value
    return str(value)
