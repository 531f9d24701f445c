"""Unit tests for ConversationService."""
import os
import sys
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'backend'))

import uuid

import pytest
from unittest.mock import Mock
from models.conversation import Conversation, Interaction
from services.conversation_service import ConversationService, new_conversation_id
from services.conversation_store import ConversationStore
from services.kv_store import InMemoryKeyValueStore, StorageError
from services.llm_client import LLMResponse, LLMError, LLMClientError


def _llm_response(text):
    return LLMResponse(
        text=text,
        tokens_input=100,
        tokens_output=5,
        latency_ms=200,
        model_used="llama-3.1-8b-instant"
    )


class TestConversationService:
    """Test suite for ConversationService."""

    @pytest.fixture
    def store(self):
        return ConversationStore(InMemoryKeyValueStore())

    @pytest.fixture
    def llm_client(self):
        client = Mock()
        client.generate.return_value = _llm_response("Paris.")
        return client

    @pytest.fixture
    def service(self, store, llm_client):
        ids = iter(["conv-1", "conv-2", "conv-3"])
        return ConversationService(
            store=store,
            llm_client=llm_client,
            id_generator=lambda: next(ids),
            model="llama-3.1-8b-instant",
            max_tokens=150,
            temperature=0.1
        )

    def test_ask_new_conversation(self, service, store):
        result = service.ask("What is the capital of France?")

        assert result.answer == "Paris."
        assert result.conversation_id == "conv-1"
        assert store.load("conv-1").interactions == [
            Interaction("What is the capital of France?", "Paris.")
        ]

    def test_ask_uses_generation_settings(self, service, llm_client):
        result = service.ask("What is the capital of France?")

        llm_client.generate.assert_called_once_with(
            prompt=result.prompt,
            model="llama-3.1-8b-instant",
            max_tokens=150,
            temperature=0.1
        )

    def test_two_turn_conversation(self, service, store, llm_client):
        """Test the second turn's prompt carries the first Q/A before the new question."""
        first = service.ask("What is the capital of France?")

        llm_client.generate.return_value = _llm_response("About 2.1 million.")
        second = service.ask("What is its population?", first.conversation_id)

        assert second.conversation_id == first.conversation_id
        prompt = llm_client.generate.call_args.kwargs["prompt"]
        first_turn = "<s>[INST]What is the capital of France?[/INST]Paris.</s>\n"
        open_turn = "<s>[INST]What is its population?[/INST]</s>\n"
        assert first_turn in prompt
        assert prompt.index(first_turn) < prompt.index(open_turn)
        assert prompt.endswith(open_turn)

        stored = store.load(first.conversation_id)
        assert stored.interactions == [
            Interaction("What is the capital of France?", "Paris."),
            Interaction("What is its population?", "About 2.1 million."),
        ]

    def test_unknown_supplied_id_starts_fresh_under_that_id(self, service, store):
        result = service.ask("Where is Lima?", "client-chosen-id")

        assert result.conversation_id == "client-chosen-id"
        assert len(store.load("client-chosen-id").interactions) == 1

    def test_failed_inference_leaves_storage_untouched(self, service, store, llm_client):
        existing = Conversation.create("conv-9")
        existing.append_interaction("q1", "a1")
        store.save(existing)

        llm_client.generate.side_effect = LLMClientError(
            LLMError(code="TIMEOUT_ERROR", message="Request timed out.", details={})
        )

        with pytest.raises(LLMClientError):
            service.ask("q2", "conv-9")

        assert store.load("conv-9").interactions == [Interaction("q1", "a1")]

    def test_failed_inference_on_new_conversation_saves_nothing(self, service, store, llm_client):
        llm_client.generate.side_effect = LLMClientError(
            LLMError(code="API_ERROR", message="Groq API error", details={})
        )

        with pytest.raises(LLMClientError):
            service.ask("q")

        assert store.exists("conv-1") is False

    def test_save_failure_propagates(self, llm_client):
        store = Mock()
        store.load.return_value = Conversation.create("conv-1")
        store.save.side_effect = StorageError("write rejected")
        service = ConversationService(store=store, llm_client=llm_client)

        with pytest.raises(StorageError):
            service.ask("q", "conv-1")

    def test_get_conversation(self, service):
        service.ask("What is the capital of France?")

        conversation = service.get_conversation("conv-1")

        assert conversation.id == "conv-1"
        assert len(conversation.interactions) == 1

    def test_get_conversation_not_found(self, service):
        assert service.get_conversation("missing") is None


class TestNewConversationId:
    """Test suite for the default identity generator."""

    def test_is_uuid(self):
        assert uuid.UUID(new_conversation_id()).version == 4

    def test_unique(self):
        assert len({new_conversation_id() for _ in range(100)}) == 100
