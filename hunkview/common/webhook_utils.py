import hashlib
import hmac
from dataclasses import dataclass
from typing import Any, Dict, Optional

from hunkview.core.exceptions import InvalidWebhookPayloadError, WebhookSignatureError

SIGNATURE_PREFIX = "sha256="


@dataclass(frozen=True)
class ReviewCommentEvent:
    """A pull request review comment that asked the assistant something."""

    owner: str
    repo: str
    pull_number: int
    comment_id: int
    commit_id: str
    path: str
    diff_hunk: str
    body: str
    login: str
    author_association: str
    created_at: str
    in_reply_to_id: Optional[int] = None


def verify_signature(secret: str, payload_body: bytes, signature_header: Optional[str]) -> None:
    """
    Verify that the webhook request came from GitHub by validating the signature.

    Args:
        secret: The configured webhook secret; validation is skipped when empty
        payload_body: The raw request body
        signature_header: Value of the X-Hub-Signature-256 header

    Raises:
        WebhookSignatureError: If the signature is missing, malformed or wrong
    """
    # Skip validation if no secret is configured (for development only)
    if not secret:
        return

    if not signature_header:
        raise WebhookSignatureError("X-Hub-Signature-256 header is missing")

    if not signature_header.startswith(SIGNATURE_PREFIX):
        raise WebhookSignatureError("invalid signature format")

    signature = signature_header[len(SIGNATURE_PREFIX):]
    expected_signature = hmac.new(
        secret.encode("utf-8"), payload_body, hashlib.sha256
    ).hexdigest()

    if not hmac.compare_digest(signature, expected_signature):
        raise WebhookSignatureError("signature does not match")


def extract_review_comment_event(
    payload: Dict[str, Any], command_prefix: str = "!ai"
) -> Optional[ReviewCommentEvent]:
    """
    Extract a ReviewCommentEvent from a pull_request_review_comment payload.

    Args:
        payload: The parsed JSON payload from the webhook
        command_prefix: Prefix a comment body must start with

    Returns:
        The event, or None if the comment was not newly created, has no author
        or does not start with the command prefix.

    Raises:
        InvalidWebhookPayloadError: If required fields are missing
    """
    if payload.get("action") != "created":
        return None

    comment = payload.get("comment")
    repository = payload.get("repository")
    pull_request = payload.get("pull_request")
    if not comment or not repository or not pull_request:
        raise InvalidWebhookPayloadError(
            "'comment', 'repository' and 'pull_request' are required"
        )

    user = comment.get("user")
    if not user:
        return None

    body = comment.get("body") or ""
    if not body.startswith(command_prefix):
        return None

    try:
        return ReviewCommentEvent(
            owner=repository["owner"]["login"],
            repo=repository["name"],
            pull_number=pull_request["number"],
            comment_id=comment["id"],
            commit_id=comment["commit_id"],
            path=comment["path"],
            diff_hunk=comment.get("diff_hunk") or "",
            body=body,
            login=user["login"],
            author_association=comment.get("author_association") or "NONE",
            created_at=comment["created_at"],
            in_reply_to_id=comment.get("in_reply_to_id"),
        )
    except (KeyError, TypeError) as e:
        raise InvalidWebhookPayloadError(f"missing field {e}") from e
