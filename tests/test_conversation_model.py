"""Unit tests for the Conversation and Interaction models."""
import os
import sys
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'backend'))

import dataclasses

import pytest
from models.conversation import Conversation, Interaction


class TestConversation:
    """Test suite for Conversation."""

    def test_create_is_empty(self):
        conversation = Conversation.create("conv-1")

        assert conversation.id == "conv-1"
        assert conversation.interactions == []

    def test_create_does_not_share_interaction_lists(self):
        first = Conversation.create("a")
        second = Conversation.create("b")

        first.append_interaction("Q", "A")

        assert second.interactions == []

    def test_append_interaction_keeps_existing_entries(self):
        """Appending leaves earlier interactions unchanged and adds the new one last."""
        conversation = Conversation.create("conv-1")
        conversation.append_interaction("q1", "a1")
        conversation.append_interaction("q2", "a2")
        before = list(conversation.interactions)

        added = conversation.append_interaction("q3", "a3")

        assert len(conversation.interactions) == 3
        assert conversation.interactions[:2] == before
        assert conversation.interactions[-1] == added == Interaction("q3", "a3")

    def test_interaction_is_immutable(self):
        interaction = Interaction(question="q", answer="a")

        with pytest.raises(dataclasses.FrozenInstanceError):
            interaction.answer = "changed"

    def test_to_dict(self):
        conversation = Conversation.create("conv-1")
        conversation.append_interaction("What is the capital of France?", "Paris.")

        assert conversation.to_dict() == {
            "id": "conv-1",
            "interactions": [{"question": "What is the capital of France?", "answer": "Paris."}],
        }

    def test_from_dict_preserves_order(self):
        data = {
            "id": "conv-1",
            "interactions": [
                {"question": "q1", "answer": "a1"},
                {"question": "q2", "answer": "a2"},
            ],
        }

        conversation = Conversation.from_dict(data)

        assert conversation.id == "conv-1"
        assert [i.question for i in conversation.interactions] == ["q1", "q2"]
        assert [i.answer for i in conversation.interactions] == ["a1", "a2"]

    def test_from_dict_ignores_unknown_fields(self):
        """Records with extra fields from newer versions remain readable."""
        data = {
            "id": "conv-1",
            "created_at": "2024-01-01T00:00:00Z",
            "interactions": [{"question": "q", "answer": "a", "model": "llama"}],
        }

        conversation = Conversation.from_dict(data)

        assert conversation.interactions == [Interaction("q", "a")]

    def test_from_dict_without_interactions(self):
        assert Conversation.from_dict({"id": "conv-1"}).interactions == []

    @pytest.mark.parametrize("data", [
        [],
        {"interactions": []},
        {"id": 5, "interactions": []},
        {"id": "conv-1", "interactions": "q/a"},
        {"id": "conv-1", "interactions": ["q"]},
        {"id": "conv-1", "interactions": [{"question": "q"}]},
    ])
    def test_from_dict_rejects_malformed_records(self, data):
        with pytest.raises(ValueError):
            Conversation.from_dict(data)
