"""
Custom exceptions module.

This module contains custom exceptions for the GitHub and LLM layers of the
application. The diff parser and formatter never raise; malformed diff input is
skipped instead.
"""


class HunkviewException(Exception):
    """Base exception class for all application-specific exceptions."""

    def __init__(
        self,
        message: str = "An error occurred in the hunkview application",
        status_code: int = 500,
    ):
        self.message = message
        self.status_code = status_code
        super().__init__(self.message)


# GitHub Service Exceptions
class GitHubServiceException(HunkviewException):
    """Base exception for GitHub service operations."""

    def __init__(
        self, message: str = "GitHub service operation failed", status_code: int = 500
    ):
        super().__init__(message, status_code)


class InvalidWebhookPayloadError(GitHubServiceException):
    """Raised when a webhook payload is invalid or missing required fields."""

    def __init__(self, details: str):
        message = f"Invalid webhook payload: {details}"
        super().__init__(message, status_code=400)


class WebhookSignatureError(GitHubServiceException):
    """Raised when the webhook signature header is missing or does not match."""

    def __init__(self, reason: str):
        message = f"Webhook signature rejected: {reason}"
        super().__init__(message, status_code=401)


class PermissionDeniedError(GitHubServiceException):
    """Raised when a comment author may not trigger a reply."""

    def __init__(self, login: str):
        self.login = login
        message = f"{login} does not have permission to use this command"
        super().__init__(message, status_code=403)


class GitHubAPIError(GitHubServiceException):
    """Raised when a GitHub REST call fails."""

    def __init__(self, operation: str, reason: str):
        message = f"GitHub API {operation} failed: {reason}"
        super().__init__(message, status_code=502)


class WebhookProcessingError(GitHubServiceException):
    """Raised when processing a webhook event fails."""

    def __init__(self, event_type: str, reason: str):
        message = f"Failed to process {event_type} webhook event: {reason}"
        super().__init__(message, status_code=500)


# LLM Service Exceptions
class LLMServiceException(HunkviewException):
    """Base exception for LLM service operations."""

    def __init__(
        self, message: str = "LLM service operation failed", status_code: int = 500
    ):
        super().__init__(message, status_code)


class LLMUnavailableError(LLMServiceException):
    """Raised when no chat model could be initialized."""

    def __init__(self, model_name: str):
        message = f"Chat model {model_name} is not available"
        super().__init__(message, status_code=503)


class ReplyGenerationError(LLMServiceException):
    """Raised when generating a reply to a review comment fails."""

    def __init__(self, reason: str):
        message = f"Failed to generate reply: {reason}"
        super().__init__(message, status_code=500)
