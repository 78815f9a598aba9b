"""
GitHub webhook endpoints and handlers.

Only pull request review comments that start with the command prefix are
answered; every other event is acknowledged and ignored.
"""

import json

from fastapi import APIRouter, BackgroundTasks, Depends, HTTPException, Request

from hunkview.api.dependencies import get_settings
from hunkview.common.webhook_utils import extract_review_comment_event, verify_signature
from hunkview.core.config import Settings
from hunkview.core.exceptions import InvalidWebhookPayloadError, WebhookSignatureError
from hunkview.core.logging_config import get_logger
from hunkview.services.github_service import handle_review_comment_event

router = APIRouter()
logger = get_logger(__name__)


@router.post("/github/webhook")
async def github_webhook(
    request: Request,
    background_tasks: BackgroundTasks,
    settings: Settings = Depends(get_settings),
):
    """
    Receives and processes webhook events from GitHub.

    Args:
        request: The incoming HTTP request
        background_tasks: FastAPI background tasks manager
        settings: Application settings

    Returns:
        Dict[str, str]: Status response with message

    Raises:
        HTTPException: If the signature, JSON body or payload is invalid
    """
    try:
        payload_body = await request.body()
        verify_signature(
            settings.GITHUB_WEBHOOK_SECRET,
            payload_body,
            request.headers.get("X-Hub-Signature-256"),
        )
        payload = json.loads(payload_body)
        event = request.headers.get("X-GitHub-Event")

        logger.info(f"Received webhook event: {event}", extra={"event_type": event})

        match event:
            case "ping":
                return {"status": "ok", "message": "pong"}

            case "pull_request_review_comment":
                review_event = extract_review_comment_event(
                    payload, settings.AI_COMMAND_PREFIX
                )
                if review_event is None:
                    return {
                        "status": "ignored",
                        "message": "Comment does not request a reply.",
                    }

                background_tasks.add_task(
                    handle_review_comment_event, review_event, settings=settings
                )
                return {
                    "status": "accepted",
                    "message": f"Reply to comment {review_event.comment_id} scheduled.",
                }

            case _:
                logger.warning(f"Unhandled event type: {event}")
                return {
                    "status": "ignored",
                    "message": f"Event '{event}' not processed.",
                }

    except WebhookSignatureError as e:
        logger.error(e.message)
        raise HTTPException(status_code=e.status_code, detail=e.message)
    except json.JSONDecodeError:
        logger.error("Failed to parse webhook payload as JSON")
        raise HTTPException(status_code=400, detail="Invalid JSON payload")
    except InvalidWebhookPayloadError as e:
        logger.error(e.message)
        raise HTTPException(status_code=e.status_code, detail=e.message)
    except Exception as e:
        logger.exception(f"Error processing webhook: {str(e)}")
        raise HTTPException(status_code=500, detail=f"Internal server error: {str(e)}")
