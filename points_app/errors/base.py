"""Root of the points app exception hierarchy."""

from typing import Optional, Dict, Any


class PointsAppError(Exception):
    """Base class for every error surfaced at the workflow boundary."""

    code = "points_error"

    def __init__(self, message: str, context: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.context = context or {}
        self.recoverable = False
