"""
Custom exceptions for the Editorial Ledger.
Every failure an action can report to a caller is one of these kinds.
"""
from typing import Iterable, Optional

from fastapi import status


class LedgerError(Exception):
    """Base exception for the ledger"""
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str = "An error occurred"):
        self.message = message
        super().__init__(self.message)


class InvalidRequest(LedgerError):
    """Malformed MCP envelope"""
    status_code = status.HTTP_400_BAD_REQUEST

    def __init__(self, message: str = 'Missing required "action" in MCP request.'):
        super().__init__(message)


class UnknownAction(LedgerError):
    """Action name is not registered"""
    status_code = status.HTTP_400_BAD_REQUEST

    def __init__(self, action: str, available: Iterable[str]):
        self.action = action
        self.available = list(available)
        super().__init__(
            f"Unknown action: {action}. Available actions: {', '.join(self.available)}"
        )


class MissingParameter(LedgerError):
    """A required field could not be resolved from any accepted alias"""

    def __init__(self, field: str, action: str):
        self.field = field
        self.action = action
        super().__init__(f'Missing required "{field}" for {action}.')


class ValidationError(LedgerError):
    """A resolved field failed a semantic check"""

    def __init__(self, message: str, field: Optional[str] = None, action: Optional[str] = None):
        self.field = field
        self.action = action
        if action:
            message = f"{message} for {action}."
        super().__init__(message)


class StoreError(LedgerError):
    """The database rejected or failed an operation"""

    def __init__(self, operation: str, cause: Optional[object] = None):
        self.operation = operation
        self.cause = cause
        message = f"Failed to {operation}"
        if cause is not None:
            message = f"{message}: {cause}"
        super().__init__(message)


class RecordNotFoundError(StoreError):
    """Lookup by key matched no row"""

    def __init__(self, resource: str = "Record", key: Optional[str] = None):
        self.resource = resource
        self.key = key
        LedgerError.__init__(self, f"{resource} not found: {key}" if key else f"{resource} not found")
        self.operation = f"find {resource.lower()}"
        self.cause = None
