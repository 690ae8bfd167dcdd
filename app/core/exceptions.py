from typing import Optional, Any


class SociopediaError(Exception):
    """
    Base exception for the Sociopedia API.
    """
    def __init__(self, message: str, code: str = "INTERNAL_ERROR", status_code: int = 500, details: Optional[Any] = None):
        self.message = message
        self.code = code
        self.status_code = status_code
        self.details = details
        super().__init__(self.message)


class ValidationError(SociopediaError):
    """
    Raised when input is malformed.
    """
    def __init__(self, message: str = "Validation error", details: Optional[Any] = None):
        super().__init__(message, code="VALIDATION_ERROR", status_code=400, details=details)


class UnauthorizedError(SociopediaError):
    """
    Raised for missing, invalid or expired tokens and bad credentials.
    """
    def __init__(self, message: str = "Unauthorized", details: Optional[Any] = None):
        super().__init__(message, code="UNAUTHORIZED", status_code=401, details=details)


class ForbiddenError(SociopediaError):
    """
    Raised when an authenticated caller acts on someone else's resource.
    """
    def __init__(self, message: str = "Forbidden", details: Optional[Any] = None):
        super().__init__(message, code="FORBIDDEN", status_code=403, details=details)


class NotFoundError(SociopediaError):
    """
    Raised when a requested resource is not found.
    """
    def __init__(self, message: str = "Resource not found", details: Optional[Any] = None):
        super().__init__(message, code="NOT_FOUND", status_code=404, details=details)


class ConflictError(SociopediaError):
    """
    Raised when a unique field is already taken.
    """
    def __init__(self, message: str = "Resource already exists", details: Optional[Any] = None):
        super().__init__(message, code="CONFLICT", status_code=409, details=details)


class StorageError(SociopediaError):
    """
    Raised when the object store rejects or fails an upload.
    """
    def __init__(self, message: str = "Error uploading file to storage", details: Optional[Any] = None):
        super().__init__(message, code="STORAGE_ERROR", status_code=500, details=details)


class DependencyError(SociopediaError):
    """
    Raised when the document store fails mid-operation.
    """
    def __init__(self, message: str = "Database operation failed", details: Optional[Any] = None):
        super().__init__(message, code="DEPENDENCY_ERROR", status_code=500, details=details)
