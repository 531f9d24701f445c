"""Prompt construction for the Llama-2 chat turn convention."""
import logging
from typing import Optional

from models.conversation import Conversation, Interaction

logger = logging.getLogger(__name__)

SYSTEM_INSTRUCTION = """<<SYS>>
You are an AI sidekick and you help users deepen their geographic knowledge.
Answer the questions as short as possible.
Never write any kind of introduction, greeting, or sign-off.
<</SYS>>"""

# Turn delimiters understood by Llama-2 chat models
BOS = "<s>"
EOS = "</s>"
INST_OPEN = "[INST]"
INST_CLOSE = "[/INST]"


class PromptBuilder:
    """Renders a conversation plus a new question into a single prompt string."""

    def __init__(self, system_instruction: Optional[str] = None):
        """
        Initialize the prompt builder.

        Args:
            system_instruction: Text of the system block (defaults to SYSTEM_INSTRUCTION)
        """
        self.system_instruction = system_instruction or SYSTEM_INSTRUCTION

    @staticmethod
    def _block(instruction: str, answer: str = "") -> str:
        return f"{BOS}{INST_OPEN}{instruction}{INST_CLOSE}{answer}{EOS}\n"

    def render_system_block(self) -> str:
        return self._block(self.system_instruction)

    def render_interaction(self, interaction: Interaction) -> str:
        return self._block(interaction.question, interaction.answer)

    def render_prompt(self, conversation: Conversation, question: str) -> str:
        """
        Build the prompt for the next turn of a conversation.

        The prompt is the system block, then one block per stored
        interaction in chronological order, then an open block holding only
        the new question. Question and answer text is embedded verbatim.

        Args:
            conversation: Conversation whose history precedes the question
            question: New, not yet answered question

        Returns:
            Complete prompt string
        """
        parts = [self.render_system_block()]
        parts.extend(self.render_interaction(interaction) for interaction in conversation.interactions)
        parts.append(self._block(question))

        prompt = "".join(parts)
        logger.debug(
            f"Rendered prompt for conversation {conversation.id}: "
            f"{len(conversation.interactions)} interactions, {len(prompt)} chars"
        )
        return prompt
