import os
from pathlib import Path

BASE_DIR = Path(__file__).resolve().parent.parent

# Logging
LOG_LEVEL = os.getenv("STREAMCHAT_LOG_LEVEL", "INFO").upper()

# Server
HOST = os.getenv("STREAMCHAT_HOST", "127.0.0.1")
PORT = int(os.getenv("STREAMCHAT_PORT", "3000"))
CORS_ORIGINS = [o.strip() for o in os.getenv("STREAMCHAT_CORS_ORIGINS", "").split(",") if o.strip()]
STATIC_DIR = Path(os.getenv("STREAMCHAT_STATIC_DIR", str(BASE_DIR / "static")))

# Upstream
MAX_TOKENS = int(os.getenv("STREAMCHAT_MAX_TOKENS", "8192"))
UPSTREAM_TIMEOUT = float(os.getenv("STREAMCHAT_UPSTREAM_TIMEOUT", "600"))   # seconds
# Failures are surfaced to the caller immediately, never retried.
UPSTREAM_MAX_RETRIES = 0

# Prompt caching
CACHE_POLICY = os.getenv("STREAMCHAT_CACHE_POLICY", "previous_turn")
CACHE_TTL = os.getenv("STREAMCHAT_CACHE_TTL", "1h")

# Console client
SERVER_URL = os.getenv("STREAMCHAT_URL", f"http://{HOST}:{PORT}")
