"""Service-layer exceptions.

These do not extend HTTPException. Services raise them and the handlers
registered in main.py turn them into JSON responses with a ``message`` body.
"""

from typing import Dict, List, Optional


class LegalMattersError(Exception):
    """Base class for business-rule failures."""

    status_code: int = 500

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)

    def to_dict(self) -> dict:
        return {"message": self.message}


class ValidationError(LegalMattersError):
    """Malformed or missing input, reported per field."""

    status_code = 400

    def __init__(self, message: str, field: Optional[str] = None):
        super().__init__(message)
        self.field = field

    def to_dict(self) -> dict:
        errors: Dict[str, List[str]] = {}
        if self.field:
            errors[self.field] = [self.message]
        return {"message": self.message, "errors": errors}


class AuthenticationError(LegalMattersError):
    status_code = 401

    def __init__(self, message: str = "Not authenticated"):
        super().__init__(message)


class AuthorizationError(LegalMattersError):
    status_code = 403

    def __init__(self, message: str = "You are not authorized to access this resource"):
        super().__init__(message)


class NotFoundError(LegalMattersError):
    status_code = 404

    def __init__(self, resource: str):
        super().__init__(f"{resource} not found")
        self.resource = resource


class ConflictError(LegalMattersError):
    """Concurrent modification detected; the client should reload and retry."""

    status_code = 409
