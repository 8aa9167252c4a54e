"""Errors raised inside the Hugging Face inference pipeline."""

from typing import Optional


class HuggingFaceServiceError(Exception):
    """Error from the Hugging Face inference service."""

    pass


class EmptyTokenError(HuggingFaceServiceError, ValueError):
    """The API token is missing or blank."""

    def __init__(self, message: str = "HuggingFace API token cannot be empty"):
        super().__init__(message)


class EmptyPromptError(HuggingFaceServiceError, ValueError):
    """The prompt is empty or whitespace only."""

    def __init__(self, message: str = "Prompt cannot be empty"):
        super().__init__(message)


class NormalizationError(HuggingFaceServiceError):
    """The response body could not be turned into a result."""

    pass


class ModelMetadataLookupError(HuggingFaceServiceError):
    """The Hub metadata lookup failed or returned nothing usable."""

    pass


class APIRequestError(HuggingFaceServiceError):
    """The inference API answered with a non-success status."""

    def __init__(
        self,
        message: str,
        status_code: int,
        error: str = "Unknown error",
        response_body: str = "",
    ):
        super().__init__(message)
        self.status_code = status_code
        self.error = error
        self.response_body = response_body


class AuthenticationError(APIRequestError):
    """401: the token is invalid or expired."""

    pass


class RateLimitError(APIRequestError):
    """429: too many requests."""

    pass


class ServiceUnavailableError(APIRequestError):
    """500: the inference backend is unavailable."""

    pass


def classify_http_error(
    status_code: int, error: Optional[str] = None, response_body: str = ""
) -> APIRequestError:
    """Build the APIRequestError subclass matching an HTTP status.

    Args:
        status_code: HTTP status of the failed response
        error: Error message reported by the API, if any
        response_body: Raw response body for diagnostics

    Returns:
        AuthenticationError, RateLimitError, ServiceUnavailableError, or a
        plain APIRequestError for any other status
    """
    error = error or "Unknown error"

    if status_code == 401:
        return AuthenticationError(
            f"Invalid or expired API token: {error}", status_code, error, response_body
        )
    if status_code == 429:
        return RateLimitError(
            f"Rate limit exceeded: {error}", status_code, error, response_body
        )
    if status_code == 500:
        return ServiceUnavailableError(
            f"HuggingFace service is unavailable: {error}",
            status_code,
            error,
            response_body,
        )
    return APIRequestError(
        f"API request failed with status {status_code}: {error}",
        status_code,
        error,
        response_body,
    )
