"""Test the conversation service turn flow."""

from unittest.mock import MagicMock

import pytest

from configs import Settings
from src.agents.lib_agent.agent import ResponseGenerator
from src.agents.lib_agent.base_llm import EchoCompletion, TextCompletion
from src.agents.lib_agent.errors import CompletionError, CompletionUnavailable
from src.agents.lib_agent.message import AgentProfile
from src.agents.lib_agent.utils.openai_llm import OpenAICompletion
from src.repositories.interactions.message_history import InMemoryMessageHistory
from src.services.chatbot import ConversationService, fallback_reply, get_conversation_service

NIMBUS = AgentProfile(display_name="Nimbus", description="a logistics vendor")


@pytest.fixture()
def completion() -> MagicMock:
    mock = MagicMock(spec=TextCompletion)
    mock.is_configured.return_value = True
    mock.complete.return_value = "Our MOQ is 1000 units."
    return mock


@pytest.fixture()
def history() -> InMemoryMessageHistory:
    return InMemoryMessageHistory()


@pytest.fixture()
def service(completion, history) -> ConversationService:
    return get_conversation_service(
        config=Settings(CONTEXT_RECENT_MESSAGES=10), history=history, completion=completion
    )


def test_send_message_records_user_and_agent_messages(service, history, completion) -> None:
    reply = service.send_message("c1", "What's your MOQ?", NIMBUS)

    assert reply.response == "Our MOQ is 1000 units."
    assert reply.is_fallback is False
    stored = history.list("c1")
    assert [(m.sender_role, m.content) for m in stored] == [
        ("user", "What's your MOQ?"),
        ("agent", "Our MOQ is 1000 units."),
    ]
    prompt = completion.complete.call_args.args[0]
    assert "Conversation history:\nUser: What's your MOQ?" in prompt
    assert prompt.splitlines()[-1] == "Nimbus:"


def test_long_conversation_triggers_one_summary_per_turn(service, completion) -> None:
    for i in range(5):
        service.send_message("c1", f"question {i}", NIMBUS)
    assert completion.complete.call_count == 5

    completion.complete.reset_mock()
    service.send_message("c1", "question 5", NIMBUS)

    # 11 messages in history: one summary call plus the reply call
    assert completion.complete.call_count == 2


def test_completion_error_records_fallback_reply(service, history, completion) -> None:
    completion.complete.side_effect = CompletionError("rate limited", status_code=429)

    reply = service.send_message("c1", "Hello?", NIMBUS)

    assert reply.is_fallback is True
    assert reply.error == "rate limited"
    assert reply.response == fallback_reply("rate limited")
    assert [m.sender_role for m in history.list("c1")] == ["user", "agent"]
    assert history.list("c1")[-1].content.startswith("I apologize, but I'm having trouble")


def test_unconfigured_completion_keeps_user_message(service, history, completion) -> None:
    completion.is_configured.return_value = False

    reply = service.send_message("c1", "Hello?", NIMBUS)

    assert reply.is_fallback is True
    completion.complete.assert_not_called()
    assert history.list("c1")[0].content == "Hello?"


def test_blank_message_is_rejected(service, history) -> None:
    with pytest.raises(ValueError):
        service.send_message("c1", "   ", NIMBUS)
    assert history.list("c1") == []


def test_get_messages_returns_history(service) -> None:
    service.send_message("c1", "Hi", NIMBUS)
    assert len(service.get_messages("c1")) == 2


def test_generator_failures_outside_completion_propagate(history) -> None:
    generator = MagicMock(spec=ResponseGenerator)
    generator.process.side_effect = RuntimeError("bug")
    service = ConversationService(history=history, response_generator=generator)

    with pytest.raises(RuntimeError):
        service.send_message("c1", "Hi", NIMBUS)


def test_factory_echo_mode() -> None:
    service = get_conversation_service(config=Settings(), echo=True)
    assert isinstance(service.response_generator.completion, EchoCompletion)
    assert service.send_message("c1", "ping", NIMBUS).response == "[EchoCompletion] You said: ping"


def test_factory_builds_openai_completion_from_settings() -> None:
    config = Settings(OPENAI_API_KEY="sk-test-123456", OPENAI_MODEL="gpt-x", CONTEXT_RECENT_MESSAGES=4)
    service = get_conversation_service(config=config)

    completion = service.response_generator.completion
    assert isinstance(completion, OpenAICompletion)
    assert completion.model == "gpt-x"
    assert completion.is_configured()
    assert service.response_generator.windower.recent_messages == 4


def test_factory_without_key_surfaces_unavailable(monkeypatch) -> None:
    monkeypatch.setattr(
        "src.agents.lib_agent.utils.openai_llm.settings.OPENAI_API_KEY", "sk-global-key-9999"
    )
    service = get_conversation_service(config=Settings(OPENAI_API_KEY=None))

    assert service.response_generator.completion.is_configured() is False
    with pytest.raises(CompletionUnavailable):
        service.response_generator.generate("Hi", "", NIMBUS)


def test_voice_text_records_transcript_and_reply(service, history, completion) -> None:
    service.send_message("c1", "Hi", NIMBUS)
    completion.complete.reset_mock()
    completion.complete.return_value = "Sure, let's talk volumes."

    reply = service.send_voice_text("c1", "Can we discuss volumes?", NIMBUS)

    assert reply.response == "Sure, let's talk volumes."
    prompt = completion.complete.call_args.args[0]
    assert "You are having a voice conversation with the user." in prompt
    assert "Previous conversation context:\nUser: Hi\n\nNimbus: Our MOQ is 1000 units.\n\n" in prompt
    assert prompt.endswith("User: Can we discuss volumes?\n\nNimbus:")
    assert [m.content for m in history.list("c1")][-2:] == [
        "Can we discuss volumes?",
        "Sure, let's talk volumes.",
    ]


def test_voice_text_failure_propagates_without_recording(service, history, completion) -> None:
    completion.complete.side_effect = CompletionError("limit", status_code=429)

    with pytest.raises(CompletionError, match="Rate limit exceeded"):
        service.send_voice_text("c1", "Hello?", NIMBUS)

    assert history.list("c1") == []


def test_blank_voice_text_is_rejected(service) -> None:
    with pytest.raises(ValueError):
        service.send_voice_text("c1", " ", NIMBUS)
