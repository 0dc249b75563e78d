# app/exceptions.py
"""
Error taxonomy for the access-control core.
Services raise these; app/main.py turns them into JSON responses with the
status code carried by each class. Nothing else should cross the API boundary.
"""

from typing import Optional


class AccessControlError(Exception):
    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(AccessControlError):
    """Malformed or missing input. Raised before any side effect."""
    status_code = 400


class NotFoundError(AccessControlError):
    status_code = 404


class GateNotFound(NotFoundError):
    def __init__(self, gate_id: str):
        super().__init__("Gate not found")
        self.gate_id = gate_id


class AccessDenied(AccessControlError):
    """
    A credential resolved but the rules rejected it.
    The denial has already been written to the access log when this is raised.
    """
    status_code = 403

    def __init__(self, message: str, reason: str, credential_type: str, log_id: Optional[str] = None):
        super().__init__(message)
        self.reason = reason
        self.credential_type = credential_type
        self.log_id = log_id


class ConflictError(AccessControlError):
    """A unique field (username, plate, RFID tag, QR code) is already taken."""
    status_code = 409


class GateUnavailable(AccessControlError):
    status_code = 409

    def __init__(self, gate_id: str, status: str):
        super().__init__(f"Gate is {status} and cannot be opened")
        self.gate_id = gate_id
        self.status = status


class ImmutableRecordError(AccessControlError):
    status_code = 409


class StorageError(AccessControlError):
    """The store failed; the unit of work was rolled back."""
    status_code = 503
