"""
Perplexity Search API integration.

Configuration:
─────────────────────────────────────────────────────────────────────────────
Set the API key in an environment variable or .env file:

    PERPLEXITY_API_KEY    https://www.perplexity.ai/settings/api
    PERPLEXITY_API_URL    optional, defaults to https://api.perplexity.ai
"""

from api.perplexity import (
    SYSTEM_PROMPT,
    PerplexityAPIError,
    PerplexityClient,
    build_payload,
    extract_content,
    extract_error_message,
)

__all__ = [
    "SYSTEM_PROMPT",
    "PerplexityAPIError",
    "PerplexityClient",
    "build_payload",
    "extract_content",
    "extract_error_message",
]
