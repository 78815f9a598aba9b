import asyncio
from unittest import mock

import pytest
from langchain_core.language_models import FakeListChatModel
from langchain_core.messages import AIMessage, HumanMessage, SystemMessage

from hunkview.core.exceptions import LLMUnavailableError, ReplyGenerationError
from hunkview.services import llm_service
from hunkview.services.llm_service import (
    AI_RESPONSE_MARKER,
    SimpleComment,
    build_messages,
    comment_to_message,
    generate_reply,
)


def test_comment_to_message_user():
    message = comment_to_message(
        SimpleComment("alice", "!ai   why is this loop here?  ", "2024-05-01T10:00:00Z")
    )

    assert isinstance(message, HumanMessage)
    assert message.content == "(alice): why is this loop here?"


def test_comment_to_message_bare_prefix():
    message = comment_to_message(SimpleComment("alice", "!ai", "2024-05-01T10:00:00Z"))
    assert message.content == "(alice): "

    message = comment_to_message(SimpleComment("alice", "!ai\n", "2024-05-01T10:00:00Z"))
    assert message.content == "(alice): "

    message = comment_to_message(SimpleComment("alice", "!aiexplain", "2024-05-01T10:00:00Z"))
    assert message.content == "(alice): explain"


def test_comment_to_message_custom_prefix():
    message = comment_to_message(
        SimpleComment("bob", "/ask what changed", "2024-05-01T10:00:00Z"), command_prefix="/ask"
    )

    assert message.content == "(bob): what changed"


def test_comment_to_message_assistant():
    message = comment_to_message(
        SimpleComment("review-bot", f"The loop retries.\n\n{AI_RESPONSE_MARKER}", "2024-05-01T10:01:00Z")
    )

    assert isinstance(message, AIMessage)
    assert message.content == "The loop retries."


def test_build_messages_sorted_oldest_first():
    comments = [
        SimpleComment("carol", "!ai and now?", "2024-05-01T10:05:00Z"),
        SimpleComment("alice", "!ai first question", "2024-05-01T10:00:00Z"),
        SimpleComment("bot", f"first answer {AI_RESPONSE_MARKER}", "2024-05-01T10:01:00+00:00"),
    ]

    messages = build_messages("File: a.py", comments)

    assert isinstance(messages[0], SystemMessage)
    assert "File: a.py" in messages[0].content
    assert [message.content for message in messages[1:]] == [
        "(alice): first question",
        "first answer",
        "(carol): and now?",
    ]


def test_generate_reply():
    model = FakeListChatModel(responses=["Looks fine."])

    answer = asyncio.run(generate_reply([HumanMessage(content="(alice): ok?")], model=model))

    assert answer == "Looks fine."


def test_generate_reply_without_model():
    with mock.patch.object(llm_service, "llm", None):
        with pytest.raises(LLMUnavailableError) as exc_info:
            asyncio.run(generate_reply([HumanMessage(content="hi")]))

    assert exc_info.value.status_code == 503


def test_generate_reply_model_failure():
    model = mock.MagicMock()
    model.ainvoke = mock.AsyncMock(side_effect=RuntimeError("connection refused"))

    with pytest.raises(ReplyGenerationError) as exc_info:
        asyncio.run(generate_reply([HumanMessage(content="hi")], model=model))

    assert "connection refused" in exc_info.value.message


def test_generate_reply_empty_answer():
    model = FakeListChatModel(responses=["   "])

    with pytest.raises(ReplyGenerationError):
        asyncio.run(generate_reply([HumanMessage(content="hi")], model=model))
