"""Services for the Geo Sidekick chat service."""
from .kv_store import KeyValueStore, InMemoryKeyValueStore, SupabaseKeyValueStore, StorageError, create_key_value_store
from .conversation_store import ConversationStore, ConversationDecodeError
from .prompt_builder import PromptBuilder, SYSTEM_INSTRUCTION
from .llm_client import LLMClient, LLMResponse, LLMError, LLMClientError
from .conversation_service import ConversationService, QueryResult, new_conversation_id

__all__ = ['KeyValueStore', 'InMemoryKeyValueStore', 'SupabaseKeyValueStore', 'StorageError', 'create_key_value_store', 'ConversationStore', 'ConversationDecodeError', 'PromptBuilder', 'SYSTEM_INSTRUCTION', 'LLMClient', 'LLMResponse', 'LLMError', 'LLMClientError', 'ConversationService', 'QueryResult', 'new_conversation_id']
