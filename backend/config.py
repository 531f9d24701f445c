"""Configuration management for the Geo Sidekick chat service."""
import os
import logging
from dotenv import load_dotenv

# Load environment variables
load_dotenv()

# API Keys
GROQ_API_KEY = os.getenv("GROQ_API_KEY")
SUPABASE_URL = os.getenv("SUPABASE_URL")
SUPABASE_KEY = os.getenv("SUPABASE_KEY")

# Server Configuration
PORT = int(os.getenv("PORT", "8000"))
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
LOG_FORMAT = os.getenv("LOG_FORMAT", "text")  # "text" or "json"

# CORS Configuration
CORS_ORIGINS = os.getenv(
    "CORS_ORIGINS",
    "http://localhost:3000,http://localhost:3001"
).split(",")

# Storage Configuration
STORAGE_BACKEND = os.getenv("STORAGE_BACKEND", "supabase")  # "supabase" or "memory"
KV_TABLE = os.getenv("KV_TABLE", "kv_store")

# Model Configuration
CHAT_MODEL = os.getenv("CHAT_MODEL", "llama-3.1-8b-instant")
MAX_TOKENS = int(os.getenv("MAX_TOKENS", "150"))  # 1 word is roughly 1.4 tokens
TEMPERATURE = float(os.getenv("TEMPERATURE", "0.1"))

# HTTP Configuration
CONVERSATION_ID_HEADER = os.getenv("CONVERSATION_ID_HEADER", "X-ConversationId")

# Logging Configuration
logging.basicConfig(
    level=getattr(logging, LOG_LEVEL),
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
