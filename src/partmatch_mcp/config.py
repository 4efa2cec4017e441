"""Configuration for the partmatch MCP server."""

import os

# Server settings
HTTP_PORT = int(os.getenv("HTTP_PORT", "8080"))
RATE_LIMIT_REQUESTS = int(os.getenv("RATE_LIMIT_REQUESTS", "100"))
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

# Request limits
MAX_MPN_LENGTH = 100  # Longest real catalog numbers are ~40 chars
MAX_CANDIDATES = 200  # Max substitutes scored per rank request
DEFAULT_RANK_LIMIT = 10
MAX_RANK_LIMIT = 50
