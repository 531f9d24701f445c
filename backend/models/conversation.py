"""Conversation data models."""
from dataclasses import dataclass, field
from typing import Any, Dict, List


@dataclass(frozen=True)
class Interaction:
    """One answered question within a conversation."""
    question: str
    answer: str

    def to_dict(self) -> Dict[str, str]:
        return {"question": self.question, "answer": self.answer}


@dataclass
class Conversation:
    """Represents a multi-turn conversation.

    ``interactions`` is append-only and kept in chronological order; the
    prompt for every later turn is rebuilt from it in that order.
    """
    id: str
    interactions: List[Interaction] = field(default_factory=list)

    @classmethod
    def create(cls, conversation_id: str) -> "Conversation":
        """Return a new conversation with no interactions."""
        return cls(id=conversation_id, interactions=[])

    def append_interaction(self, question: str, answer: str) -> Interaction:
        """
        Append a question/answer pair to the end of the history.

        Only the in-memory conversation changes; persisting it is the
        caller's job.

        Args:
            question: Question as asked by the user
            answer: Answer returned by the inference backend

        Returns:
            The newly recorded Interaction
        """
        interaction = Interaction(question=question, answer=answer)
        self.interactions.append(interaction)
        return interaction

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to the field-tagged form used for storage and the API."""
        return {
            "id": self.id,
            "interactions": [interaction.to_dict() for interaction in self.interactions],
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Conversation":
        """
        Rebuild a conversation from its serialized form.

        Unknown keys are ignored so that records written by newer versions
        stay readable.

        Raises:
            ValueError: If required fields are missing or have the wrong type
        """
        if not isinstance(data, dict):
            raise ValueError(f"Conversation record must be an object, got {type(data).__name__}")

        conversation_id = data.get("id")
        if not isinstance(conversation_id, str):
            raise ValueError("Conversation record is missing a string 'id'")

        raw_interactions = data.get("interactions", [])
        if not isinstance(raw_interactions, list):
            raise ValueError("Conversation 'interactions' must be a list")

        interactions = []
        for index, item in enumerate(raw_interactions):
            if not isinstance(item, dict):
                raise ValueError(f"Interaction {index} must be an object")
            question = item.get("question")
            answer = item.get("answer")
            if not isinstance(question, str) or not isinstance(answer, str):
                raise ValueError(f"Interaction {index} must have string 'question' and 'answer'")
            interactions.append(Interaction(question=question, answer=answer))

        return cls(id=conversation_id, interactions=interactions)
