"""Persistence of conversations in a key-value store."""
import logging

from models.conversation import Conversation
from services.kv_store import KeyValueStore, StorageError

logger = logging.getLogger(__name__)


class ConversationDecodeError(StorageError):
    """Raised when a stored value is not a valid conversation record."""


class ConversationStore:
    """Loads and saves whole conversations keyed by conversation id."""

    def __init__(self, kv_store: KeyValueStore):
        self.kv_store = kv_store

    def exists(self, conversation_id: str) -> bool:
        """
        Check whether a conversation has been stored.

        Storage errors are logged and reported as absent.
        """
        try:
            return self.kv_store.exists(conversation_id)
        except Exception as e:
            logger.warning(f"Could not check conversation {conversation_id}, treating as absent: {e}")
            return False

    def load(self, conversation_id: str) -> Conversation:
        """
        Load a conversation, starting a fresh one if none is stored.

        Args:
            conversation_id: ID of the conversation

        Returns:
            Stored Conversation, or an empty one with the given id

        Raises:
            ConversationDecodeError: If the stored record is malformed
            StorageError: If the backend cannot be read
        """
        data = self.kv_store.get_json(conversation_id)
        if data is None:
            logger.info(f"Conversation {conversation_id} not found, starting a new one")
            return Conversation.create(conversation_id)

        try:
            conversation = Conversation.from_dict(data)
        except ValueError as e:
            logger.error(f"Malformed record for conversation {conversation_id}: {e}")
            raise ConversationDecodeError(f"Malformed record for conversation {conversation_id}: {e}") from e

        if conversation.id != conversation_id:
            raise ConversationDecodeError(
                f"Record stored under {conversation_id} belongs to conversation {conversation.id}"
            )

        logger.info(f"Loaded conversation {conversation_id} with {len(conversation.interactions)} interactions")
        return conversation

    def save(self, conversation: Conversation) -> None:
        """
        Write the full conversation under its id, replacing any previous record.

        Raises:
            StorageError: If the backend rejects the write
        """
        self.kv_store.set_json(conversation.id, conversation.to_dict())
        logger.info(f"Saved conversation {conversation.id} with {len(conversation.interactions)} interactions")
