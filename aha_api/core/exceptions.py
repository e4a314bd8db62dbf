from fastapi import HTTPException, status


class ValidationError(HTTPException):
    """Exception raised when required input is missing or malformed."""

    def __init__(self, message: str = "all fields required"):
        super().__init__(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=message
        )


class DuplicateEmailError(HTTPException):
    """Exception raised when registering an email that is already taken."""

    def __init__(self, message: str = "email already exists"):
        super().__init__(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=message
        )


class AuthError(HTTPException):
    """
    Exception raised for bad credentials.

    Uses 400 rather than 401; existing clients depend on it.
    """

    def __init__(self, message: str = "invalid email or password"):
        super().__init__(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=message
        )


class QuotaExceededError(HTTPException):
    """Exception raised when a free-tier account has used all its requests."""

    def __init__(self, message: str = "free request limit exhausted"):
        super().__init__(
            status_code=status.HTTP_403_FORBIDDEN,
            detail=message
        )


class UpstreamError(HTTPException):
    """Exception raised when the completion API call fails."""

    def __init__(self, message: str = "LLM Error"):
        super().__init__(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=message
        )


class InternalError(HTTPException):
    """Exception raised for unexpected server-side failures."""

    def __init__(self, message: str = "server error"):
        super().__init__(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=message
        )
