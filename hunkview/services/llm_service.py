import re
from dataclasses import dataclass
from datetime import datetime
from typing import List, Optional, Sequence

from langchain_core.language_models.chat_models import BaseChatModel
from langchain_core.messages import AIMessage, BaseMessage, HumanMessage, SystemMessage
from langchain_ollama.chat_models import ChatOllama

from hunkview.core.config import get_settings
from hunkview.core.exceptions import LLMUnavailableError, ReplyGenerationError
from hunkview.core.logging_config import get_logger
from hunkview.llm.prompts import REVIEW_REPLY_SYSTEM_PROMPT

logger = get_logger(__name__)

# Appended to every reply the bot posts so later turns can tell them apart.
AI_RESPONSE_MARKER = "<!-- AI_RESPONSE -->"


@dataclass(frozen=True)
class SimpleComment:
    """The parts of a review comment that end up in the conversation."""

    login: str
    body: str
    created_at: str

    @property
    def created_at_dt(self) -> datetime:
        created_at = self.created_at
        if created_at.endswith("Z"):
            created_at = created_at[:-1] + "+00:00"  # fromisoformat expects +HH:MM
        return datetime.fromisoformat(created_at)


def initialize_llm() -> Optional[ChatOllama]:
    """
    Initialize the chat model with proper error handling.

    Returns:
        Optional[ChatOllama]: Initialized chat model or None if initialization fails
    """
    settings = get_settings()

    try:
        model = ChatOllama(model=settings.CHAT_MODEL_NAME, base_url=settings.LLM_BASE_URL)
        logger.info(
            f"Configured chat model {settings.CHAT_MODEL_NAME} at {settings.LLM_BASE_URL}"
        )
        return model
    except Exception as e:
        logger.error(f"Failed to configure chat model {settings.CHAT_MODEL_NAME}: {e}")
        return None


llm = initialize_llm()


def comment_to_message(comment: SimpleComment, command_prefix: str = "!ai") -> BaseMessage:
    """
    Converts a review comment into a chat message.

    Comments carrying AI_RESPONSE_MARKER were posted by this service and become
    assistant messages. Everything else is a user message prefixed with the
    author's login, with the leading command prefix removed.
    """
    command_re = re.compile(rf"^{re.escape(command_prefix)}\s*")
    content = command_re.sub("", comment.body, count=1)
    content = content.replace(AI_RESPONSE_MARKER, "").strip()

    if AI_RESPONSE_MARKER in comment.body:
        return AIMessage(content=content)
    return HumanMessage(content=f"({comment.login}): {content}")


def build_messages(
    code: str, comments: Sequence[SimpleComment], command_prefix: str = "!ai"
) -> List[BaseMessage]:
    """
    Builds the conversation sent to the chat model.

    Args:
        code: The rendered side-by-side diff the comments are attached to
        comments: Comments of the reply chain, in any order
        command_prefix: Prefix that triggers the assistant

    Returns:
        List[BaseMessage]: A system message followed by the comments, oldest first
    """
    ordered = sorted(comments, key=lambda comment: comment.created_at_dt)
    messages: List[BaseMessage] = [
        SystemMessage(content=REVIEW_REPLY_SYSTEM_PROMPT.format(code=code))
    ]
    messages.extend(comment_to_message(comment, command_prefix) for comment in ordered)
    return messages


async def generate_reply(
    messages: Sequence[BaseMessage], model: Optional[BaseChatModel] = None
) -> str:
    """
    Asks the chat model for a reply to the conversation.

    Args:
        messages: Conversation built by build_messages
        model: Chat model to use, defaults to the module-level model

    Returns:
        str: The reply text

    Raises:
        LLMUnavailableError: If no chat model is configured
        ReplyGenerationError: If the model call fails or returns nothing
    """
    model = model if model is not None else llm
    if model is None:
        raise LLMUnavailableError(get_settings().CHAT_MODEL_NAME)

    logger.debug(f"Sending {len(messages)} message(s) to the chat model")
    try:
        response = await model.ainvoke(list(messages))
    except Exception as e:
        logger.exception(f"Chat model invocation failed: {e}")
        raise ReplyGenerationError(str(e)) from e

    answer = response.content if isinstance(response.content, str) else str(response.content)
    if not answer.strip():
        logger.warning("Chat model returned an empty reply")
        raise ReplyGenerationError("empty response from chat model")

    logger.info(f"Generated reply with {len(answer)} chars")
    return answer
