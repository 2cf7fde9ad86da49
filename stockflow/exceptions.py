"""Domain exceptions raised by the service layer.

Each exception carries the HTTP status code it maps to; the application's
exception handlers turn them into ``{"message": ...}`` responses.
"""
from fastapi import status


class StockFlowError(Exception):
    """Base class for all domain errors."""
    status_code = status.HTTP_400_BAD_REQUEST

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class NotFoundError(StockFlowError):
    """Referenced entity does not exist."""
    status_code = status.HTTP_404_NOT_FOUND


class ValidationError(StockFlowError):
    """Malformed or out-of-range input."""


class InsufficientStockError(StockFlowError):
    """Requested or approved amount exceeds the available quantity."""


class InvalidAdjustmentError(StockFlowError):
    """Adjustment would drive the quantity below zero."""


class RequestAlreadyProcessedError(StockFlowError):
    """Request is no longer pending."""


class AuthenticationError(StockFlowError):
    status_code = status.HTTP_401_UNAUTHORIZED


class InactiveAccountError(StockFlowError):
    status_code = status.HTTP_403_FORBIDDEN


class PermissionDeniedError(StockFlowError):
    status_code = status.HTTP_403_FORBIDDEN
