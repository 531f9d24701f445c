"""Question handling for multi-turn conversations."""
import logging
import uuid
from dataclasses import dataclass
from typing import Callable, Optional

from config import CHAT_MODEL, MAX_TOKENS, TEMPERATURE
from models.conversation import Conversation
from services.conversation_store import ConversationStore
from services.llm_client import LLMClient
from services.prompt_builder import PromptBuilder

logger = logging.getLogger(__name__)


def new_conversation_id() -> str:
    """Generate a random, globally unique conversation ID."""
    return str(uuid.uuid4())


@dataclass
class QueryResult:
    """Answer to one question and the conversation it belongs to."""
    answer: str
    conversation_id: str
    prompt: str


class ConversationService:
    """Answers questions in the context of a stored conversation."""

    def __init__(
        self,
        store: ConversationStore,
        llm_client: LLMClient,
        prompt_builder: Optional[PromptBuilder] = None,
        id_generator: Callable[[], str] = new_conversation_id,
        model: str = CHAT_MODEL,
        max_tokens: int = MAX_TOKENS,
        temperature: float = TEMPERATURE
    ):
        self.store = store
        self.llm_client = llm_client
        self.prompt_builder = prompt_builder or PromptBuilder()
        self.id_generator = id_generator
        self.model = model
        self.max_tokens = max_tokens
        self.temperature = temperature

    def resolve_conversation(self, conversation_id: Optional[str] = None) -> Conversation:
        """Load the conversation for a supplied id, or start one under a fresh id."""
        if conversation_id:
            return self.store.load(conversation_id)

        conversation = Conversation.create(self.id_generator())
        logger.info(f"Started new conversation: {conversation.id}")
        return conversation

    def ask(self, question: str, conversation_id: Optional[str] = None) -> QueryResult:
        """
        Answer a question and record it in the conversation.

        The interaction is appended and saved only after inference succeeds;
        a failed inference leaves the stored conversation untouched.

        Args:
            question: User question
            conversation_id: Conversation to continue (a new one is created if omitted)

        Returns:
            QueryResult with the answer and the conversation ID

        Raises:
            LLMClientError: If inference fails
            StorageError: If the conversation cannot be loaded or saved
        """
        conversation = self.resolve_conversation(conversation_id)
        prompt = self.prompt_builder.render_prompt(conversation, question)

        llm_response = self.llm_client.generate(
            prompt=prompt,
            model=self.model,
            max_tokens=self.max_tokens,
            temperature=self.temperature
        )

        conversation.append_interaction(question, llm_response.text)
        self.store.save(conversation)

        return QueryResult(
            answer=llm_response.text,
            conversation_id=conversation.id,
            prompt=prompt
        )

    def get_conversation(self, conversation_id: str) -> Optional[Conversation]:
        """Return the stored conversation, or None if it does not exist."""
        if not self.store.exists(conversation_id):
            return None
        return self.store.load(conversation_id)
