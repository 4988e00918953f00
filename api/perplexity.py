"""Perplexity API integration.

Implements the chat-completions endpoint used for web search:
- POST /chat/completions with Sonar models and optional search filters
"""

import json
import logging
from typing import Any, Dict, List, Optional

import httpx

from models import DEFAULT_BASE_URL, DEFAULT_TIMEOUT

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = (
    "You are a helpful assistant that searches the web for accurate information."
)


class PerplexityAPIError(Exception):
    """A failed call to the Perplexity API, with the best available message."""

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        body: Any = None,
    ):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.body = body


def build_payload(
    query: str,
    model: str,
    domain_filter: Optional[List[str]] = None,
    recency_filter: Optional[str] = None,
) -> Dict[str, Any]:
    """Build the chat-completions request body.

    Filters are only included when they carry a value.
    """
    payload: Dict[str, Any] = {
        "model": model,
        "messages": [
            {"role": "system", "content": SYSTEM_PROMPT},
            {"role": "user", "content": query},
        ],
    }

    if domain_filter:
        payload["search_domain_filter"] = list(domain_filter)

    if recency_filter:
        payload["search_recency_filter"] = recency_filter

    return payload


def extract_error_message(response: httpx.Response, fallback: str) -> str:
    """Pick the most specific error message from an error response body.

    Prefers ``error.message``, then ``detail``, then ``fallback``.
    """
    try:
        data = response.json()
    except (json.JSONDecodeError, UnicodeDecodeError):
        return fallback

    if isinstance(data, dict):
        error = data.get("error")
        if isinstance(error, dict) and error.get("message"):
            return str(error["message"])
        if data.get("detail"):
            return str(data["detail"])

    return fallback


def extract_content(data: Dict[str, Any]) -> Optional[str]:
    """Return the first choice's message content, or None when there is none."""
    choices = data.get("choices") if isinstance(data, dict) else None
    if not isinstance(choices, list) or not choices:
        return None
    if not isinstance(choices[0], dict):
        return None

    message = choices[0].get("message") or {}
    if not isinstance(message, dict):
        return None
    return message.get("content") or ""


class PerplexityClient:
    """Thin async client for the Perplexity chat-completions API."""

    def __init__(
        self,
        api_key: str,
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = DEFAULT_TIMEOUT,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._headers = {
            "Authorization": f"Bearer {api_key}",
            "Content-Type": "application/json",
        }
        self._transport = transport

    async def chat_completions(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        """POST a chat-completions request and return the decoded body.

        Raises:
            PerplexityAPIError: on transport failures, non-2xx responses and
                bodies that are not JSON.
        """
        try:
            async with httpx.AsyncClient(
                base_url=self.base_url,
                headers=self._headers,
                timeout=self.timeout,
                transport=self._transport,
            ) as client:
                response = await client.post("/chat/completions", json=payload)
                response.raise_for_status()
                return response.json()

        except httpx.HTTPStatusError as e:
            body = _safe_body(e.response)
            logger.error(
                "Perplexity HTTP %s error. Full error: %s",
                e.response.status_code,
                json.dumps(body, indent=2) if not isinstance(body, str) else body,
            )
            raise PerplexityAPIError(
                extract_error_message(e.response, str(e)),
                status_code=e.response.status_code,
                body=body,
            ) from e
        except httpx.HTTPError as e:
            logger.error("Perplexity request failed: %s", e)
            raise PerplexityAPIError(str(e) or type(e).__name__) from e
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            logger.error("Perplexity returned a non-JSON body: %s", e)
            raise PerplexityAPIError(f"Invalid JSON in response: {e}") from e

    async def search(
        self,
        query: str,
        model: str,
        domain_filter: Optional[List[str]] = None,
        recency_filter: Optional[str] = None,
    ) -> str:
        """Run a web search and return the answer text.

        Raises:
            PerplexityAPIError: when the call fails or yields no choices.
        """
        payload = build_payload(query, model, domain_filter, recency_filter)
        logger.debug("Perplexity search with model %s", model)

        data = await self.chat_completions(payload)
        content = extract_content(data)
        if content is None:
            raise PerplexityAPIError("No response content received", body=data)
        return content


def _safe_body(response: httpx.Response) -> Any:
    try:
        return response.json()
    except (json.JSONDecodeError, UnicodeDecodeError):
        return response.text
