"""GitHub service module.

This module talks to the GitHub REST API and runs the reply pipeline for
pull request review comments: render the comment's diff hunk side by side,
collect the reply chain, ask the chat model, and post the answer.
"""

from typing import Any, Dict, Iterable, List, Optional

import requests
from requests.exceptions import HTTPError, RequestException

from hunkview.common.webhook_utils import ReviewCommentEvent
from hunkview.core.config import Settings, get_settings
from hunkview.core.exceptions import (
    GitHubAPIError,
    LLMServiceException,
    PermissionDeniedError,
    WebhookProcessingError,
)
from hunkview.core.logging_config import get_logger
from hunkview.diff import FormatOptions, format_diff_hunk
from hunkview.llm.prompts import ERROR_REPLY_TEMPLATE
from hunkview.services.llm_service import (
    AI_RESPONSE_MARKER,
    SimpleComment,
    build_messages,
    generate_reply,
)

logger = get_logger(__name__)

GITHUB_API_VERSION = "2022-11-28"


class GitHubClient:
    """Minimal client for the pull request review comment endpoints."""

    def __init__(self, token: str, base_url: str = "https://api.github.com"):
        self.token = token
        self.base_url = base_url.rstrip("/")

    @property
    def headers(self) -> Dict[str, str]:
        headers = {
            "Accept": "application/vnd.github+json",
            "X-GitHub-Api-Version": GITHUB_API_VERSION,
        }
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        return headers

    def get_review_comment(self, owner: str, repo: str, comment_id: int) -> Dict[str, Any]:
        """Fetches a single review comment."""
        url = f"{self.base_url}/repos/{owner}/{repo}/pulls/comments/{comment_id}"
        try:
            response = requests.get(url, headers=self.headers)
            response.raise_for_status()
            return response.json()
        except HTTPError as e:
            logger.error(f"Error fetching review comment {comment_id}: {e}. Details: {e.response.text}")
            raise GitHubAPIError("get_review_comment", str(e)) from e
        except RequestException as e:
            logger.error(f"Error fetching review comment {comment_id}: {e}")
            raise GitHubAPIError("get_review_comment", str(e)) from e

    def fetch_comment_chain(
        self, owner: str, repo: str, in_reply_to_id: Optional[int]
    ) -> List[SimpleComment]:
        """
        Walks the in_reply_to_id links starting at in_reply_to_id.

        Returns:
            List[SimpleComment]: The chain, nearest ancestor first
        """
        comments: List[SimpleComment] = []
        seen = set()
        comment_id = in_reply_to_id

        while comment_id and comment_id not in seen:
            seen.add(comment_id)
            data = self.get_review_comment(owner, repo, comment_id)
            comments.append(
                SimpleComment(
                    login=(data.get("user") or {}).get("login", "unknown"),
                    body=data.get("body") or "",
                    created_at=data["created_at"],
                )
            )
            comment_id = data.get("in_reply_to_id")

        logger.debug(f"Fetched {len(comments)} earlier comment(s) from {owner}/{repo}")
        return comments

    def post_review_reply(
        self,
        owner: str,
        repo: str,
        pull_number: int,
        commit_id: str,
        path: str,
        in_reply_to: int,
        body: str,
    ) -> Dict[str, Any]:
        """Posts a reply to a review comment thread."""
        url = f"{self.base_url}/repos/{owner}/{repo}/pulls/{pull_number}/comments"
        payload = {
            "body": body,
            "commit_id": commit_id,
            "path": path,
            "in_reply_to": in_reply_to,
        }

        try:
            response = requests.post(url, headers=self.headers, json=payload)
            response.raise_for_status()
            logger.info(f"Posted reply to comment {in_reply_to} on PR #{pull_number}.")
            return response.json()
        except HTTPError as e:
            logger.error(
                f"Error posting reply to PR #{pull_number}: {e}. Details: {e.response.text}"
            )
            raise GitHubAPIError("post_review_reply", str(e)) from e
        except RequestException as e:
            logger.error(f"Error posting reply to PR #{pull_number}: {e}")
            raise GitHubAPIError("post_review_reply", str(e)) from e


def check_permission(login: str, author_association: str, allowed: Iterable[str]) -> None:
    """
    Raises PermissionDeniedError unless the author association is allowed.

    Associations are compared case-insensitively ("OWNER" and "owner" match).
    """
    if author_association.lower() not in {association.lower() for association in allowed}:
        raise PermissionDeniedError(login)


def _reply_body(text: str) -> str:
    return f"{text.strip()}\n\n{AI_RESPONSE_MARKER}"


async def handle_review_comment_event(
    event: ReviewCommentEvent,
    client: Optional[GitHubClient] = None,
    settings: Optional[Settings] = None,
) -> str:
    """
    Answers a review comment and posts the answer as a reply.

    Args:
        event: The triggering review comment
        client: GitHub client, built from settings when omitted
        settings: Application settings, defaults to get_settings()

    Returns:
        str: The body that was posted

    Raises:
        GitHubAPIError: If fetching the chain or posting the reply fails
        WebhookProcessingError: On any other unexpected failure
    """
    settings = settings or get_settings()
    client = client or GitHubClient(settings.GITHUB_TOKEN, settings.GITHUB_API_BASE_URL)
    logger.info(
        f"Handling review comment {event.comment_id} on {event.owner}/{event.repo}#{event.pull_number}",
        extra={"comment_id": event.comment_id},
    )

    try:
        try:
            check_permission(
                event.login, event.author_association, settings.ALLOWED_AUTHOR_ASSOCIATIONS
            )
        except PermissionDeniedError as e:
            logger.warning(e.message)
            body = _reply_body(ERROR_REPLY_TEMPLATE.format(reason=e.message))
            client.post_review_reply(
                event.owner, event.repo, event.pull_number, event.commit_id,
                event.path, event.comment_id, body,
            )
            return body

        options = FormatOptions(
            total_width=settings.DIFF_TOTAL_WIDTH,
            show_line_numbers=settings.DIFF_SHOW_LINE_NUMBERS,
        )
        code = format_diff_hunk(event.diff_hunk, event.path, options)

        comments = client.fetch_comment_chain(event.owner, event.repo, event.in_reply_to_id)
        comments.append(SimpleComment(event.login, event.body, event.created_at))
        messages = build_messages(code, comments, settings.AI_COMMAND_PREFIX)

        try:
            answer = await generate_reply(messages)
        except LLMServiceException as e:
            logger.error(f"LLM service error for comment {event.comment_id}: {e.message}")
            answer = ERROR_REPLY_TEMPLATE.format(reason=e.message)

        body = _reply_body(answer)
        client.post_review_reply(
            event.owner, event.repo, event.pull_number, event.commit_id,
            event.path, event.comment_id, body,
        )
        return body

    except GitHubAPIError:
        # Re-raise without wrapping to preserve the original exception
        raise
    except Exception as e:
        error_msg = f"Unexpected error handling review comment {event.comment_id}: {str(e)}"
        logger.exception(error_msg)
        raise WebhookProcessingError("pull_request_review_comment", error_msg) from e
