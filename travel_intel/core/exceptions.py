"""Custom exception classes."""

from fastapi import status


class TravelIntelException(Exception):
    """Base exception for the travel intelligence application."""

    def __init__(self, message: str, status_code: int = 500):
        self.message = message
        self.status_code = status_code
        super().__init__(self.message)


class ExternalServiceError(TravelIntelException):
    """External data source (weather, imagery, positioning) error."""

    def __init__(self, message: str = "External service unavailable"):
        super().__init__(message, status.HTTP_503_SERVICE_UNAVAILABLE)


class ValidationError(TravelIntelException):
    """Request parameters a data source cannot serve."""

    def __init__(self, message: str = "Validation failed"):
        super().__init__(message, status.HTTP_422_UNPROCESSABLE_ENTITY)
