"""Main entry point for the Geo Sidekick chat API."""
import logging
import time
from typing import Optional

import tiktoken
from fastapi import FastAPI, Header, HTTPException, Response
from fastapi.middleware.cors import CORSMiddleware

from config import (
    PORT,
    LOG_LEVEL,
    LOG_FORMAT,
    CORS_ORIGINS,
    STORAGE_BACKEND,
    CONVERSATION_ID_HEADER,
)
from logger import setup_logging
from models.api import QueryRequest, QueryResponse, ConversationResponse
from services.kv_store import StorageError, create_key_value_store
from services.conversation_store import ConversationStore
from services.conversation_service import ConversationService
from services.llm_client import LLMClient, LLMClientError
from services.prompt_builder import PromptBuilder

# Initialize logging
logger = logging.getLogger(__name__)

# Initialize FastAPI app
app = FastAPI(
    title="Geo Sidekick",
    description="Conversational assistant that helps users deepen their geographic knowledge",
    version="1.0.0"
)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=[CONVERSATION_ID_HEADER],
)

# Initialize services (will be done on startup)
conversation_service: ConversationService = None
tiktoken_encoder = None


@app.on_event("startup")
async def startup_event():
    """Initialize services on startup."""
    global conversation_service, tiktoken_encoder

    if LOG_FORMAT == "json":
        setup_logging(LOG_LEVEL)

    logger.info("Initializing Geo Sidekick services...")

    try:
        # Initialize tiktoken encoder for prompt token counting
        tiktoken_encoder = tiktoken.get_encoding("o200k_base")
        logger.info("Initialized tiktoken encoder (o200k_base)")

        kv_store = create_key_value_store(STORAGE_BACKEND)
        store = ConversationStore(kv_store)
        logger.info(f"Initialized ConversationStore ({STORAGE_BACKEND})")

        llm_client = LLMClient()
        logger.info("Initialized LLMClient")

        conversation_service = ConversationService(
            store=store,
            llm_client=llm_client,
            prompt_builder=PromptBuilder()
        )
        logger.info("Initialized ConversationService")

        logger.info("All services initialized successfully")
    except Exception as e:
        logger.error(f"Failed to initialize services: {e}", exc_info=True)
        raise


@app.get("/")
async def root():
    """Service banner."""
    return {"status": "ok", "message": "Geo Sidekick API"}


@app.get("/health")
async def health():
    """Detailed health check."""
    return {
        "status": "healthy",
        "service": "geo-sidekick",
        "version": "1.0.0"
    }


def _reserved_conversation_ids() -> set:
    """Static paths that would shadow GET /{conversation_id}."""
    return {
        route.path.lstrip("/")
        for route in app.routes
        if "{" not in route.path and route.path != "/"
    }


def _storage_error(e: StorageError) -> HTTPException:
    return HTTPException(
        status_code=503,
        detail={
            "error": {
                "code": "STORAGE_ERROR",
                "message": "Conversation storage is unavailable or holds a malformed record.",
                "details": {"original_error": str(e)}
            }
        }
    )


@app.post("/", response_model=QueryResponse)
def ask_endpoint(
    request: QueryRequest,
    response: Response,
    conversation_id_header: Optional[str] = Header(None, alias=CONVERSATION_ID_HEADER)
) -> QueryResponse:
    """
    Answer a question, continuing a conversation when an ID is supplied.

    The conversation ID is read from the X-ConversationId header, falling
    back to the ``conversation_id`` body field. A new conversation is
    started when neither is present. The ID is returned in the body and
    echoed in the X-ConversationId response header.

    Args:
        request: QueryRequest with question and optional conversation_id

    Returns:
        QueryResponse with answer and conversation_id

    Raises:
        HTTPException: For validation errors, inference or storage failures
    """
    start_time = time.time()

    try:
        if not request.question.strip():
            raise HTTPException(status_code=400, detail="Question field is required and cannot be empty")

        conversation_id = conversation_id_header or request.conversation_id
        if conversation_id in _reserved_conversation_ids():
            raise HTTPException(
                status_code=400,
                detail=f"Conversation ID '{conversation_id}' is reserved by the API"
            )
        logger.info(f"Processing question for conversation {conversation_id or '<new>'}: {request.question[:100]}")

        result = conversation_service.ask(request.question, conversation_id)

        prompt_tokens = len(tiktoken_encoder.encode(result.prompt, disallowed_special=()))
        total_latency_ms = int((time.time() - start_time) * 1000)
        logger.info(
            f"Answered question for conversation {result.conversation_id} "
            f"(prompt_tokens={prompt_tokens}) in {total_latency_ms}ms"
        )

        response.headers[CONVERSATION_ID_HEADER] = result.conversation_id
        return QueryResponse(answer=result.answer, conversation_id=result.conversation_id)

    except HTTPException:
        # Re-raise HTTP exceptions
        raise
    except LLMClientError as e:
        # Handle LLM client errors with structured error response
        logger.error(f"LLM client error: {e.error.message}")
        raise HTTPException(
            status_code=503,
            detail={
                "error": {
                    "code": e.error.code,
                    "message": e.error.message,
                    "details": e.error.details
                }
            }
        )
    except StorageError as e:
        logger.error(f"Storage error: {e}", exc_info=True)
        raise _storage_error(e)
    except Exception as e:
        # Handle unexpected errors
        logger.error(f"Unexpected error processing question: {e}", exc_info=True)
        raise HTTPException(
            status_code=500,
            detail=f"Internal server error: {str(e)}"
        )


@app.get("/{conversation_id}", response_model=ConversationResponse)
def get_conversation_endpoint(conversation_id: str) -> ConversationResponse:
    """
    Return a stored conversation with its interactions in order.

    Raises:
        HTTPException: 404 if the conversation does not exist
    """
    try:
        conversation = conversation_service.get_conversation(conversation_id)
    except StorageError as e:
        logger.error(f"Storage error fetching conversation {conversation_id}: {e}", exc_info=True)
        raise _storage_error(e)

    if conversation is None:
        raise HTTPException(status_code=404, detail="Conversation not found")

    return ConversationResponse(**conversation.to_dict())


if __name__ == "__main__":
    import uvicorn
    logger.info(f"Starting Geo Sidekick API on port {PORT}")
    uvicorn.run(app, host="0.0.0.0", port=PORT)
