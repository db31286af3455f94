"""Custom application exceptions."""


class AppException(Exception):
    """Base application exception."""

    def __init__(self, message: str, status_code: int = 500):
        """Initialize exception with message and status code."""
        self.message = message
        self.status_code = status_code
        super().__init__(self.message)


class NotFoundException(AppException):
    """Document not found exception."""

    def __init__(self, message: str = "Document not found"):
        """Initialize with 404 status code."""
        super().__init__(message, status_code=404)


class ValidationException(AppException):
    """Missing or malformed caller input."""

    def __init__(self, message: str = "Validation error"):
        """Initialize with 400 status code."""
        super().__init__(message, status_code=400)


class UploadException(AppException):
    """Rejected upload (missing file or unsupported content type)."""

    def __init__(self, message: str = "Upload failed"):
        """Initialize with 400 status code."""
        super().__init__(message, status_code=400)


class StoreException(AppException):
    """Document store call failed."""

    def __init__(self, message: str = "Document store error"):
        """Initialize with 500 status code."""
        super().__init__(message, status_code=500)


class AuthProviderException(AppException):
    """Identity provider call failed."""

    def __init__(self, message: str = "Authentication provider error"):
        """Initialize with 500 status code."""
        super().__init__(message, status_code=500)
