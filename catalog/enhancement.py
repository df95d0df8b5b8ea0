"""Client for the external text-generation service.

Builds a fixed prompt from a product's name, description and category and
POSTs it to the configured endpoint with a bearer token. The first returned
choice is used as the new description. Calls are not retried.
"""

import logging
from typing import Any, Optional

import requests  # type: ignore[import-untyped]

from catalog.config import ENHANCEMENT_API_KEY, ENHANCEMENT_URL, REQUEST_TIMEOUT
from catalog.errors import EnhancementError
from catalog.logging_config import get_logger, log_catalog_event

__all__ = ["PROMPT_TEMPLATE", "build_prompt", "EnhancementClient"]

logger = get_logger("enhancement")

PROMPT_TEMPLATE = """You are an expert in medical sales. Your specialty is medical consumables used by hospitals on a daily basis.
Product Name: {name}
Product Description: {description}
Category: {category}

New Description: """


def build_prompt(name: Optional[str], description: Optional[str], category: Optional[str]) -> str:
    """Fill the enhancement prompt template."""
    return PROMPT_TEMPLATE.format(
        name=name or "",
        description=description or "",
        category=category or "",
    )


def _extract_text(payload: Any) -> str:
    """Pull ``choices[0].text`` out of a response payload."""
    if not isinstance(payload, dict):
        raise EnhancementError("Enhancement response is not a JSON object")
    choices = payload.get("choices")
    if not isinstance(choices, list) or not choices:
        raise EnhancementError("Enhancement response has no choices")
    first = choices[0]
    text = first.get("text") if isinstance(first, dict) else None
    if not isinstance(text, str) or not text.strip():
        raise EnhancementError("Enhancement response has no usable text")
    return text.strip()


class EnhancementClient:
    """Generates product descriptions through the external service."""

    def __init__(
        self,
        url: str = ENHANCEMENT_URL,
        api_key: str = ENHANCEMENT_API_KEY,
        timeout: float = REQUEST_TIMEOUT,
        session: Optional[requests.Session] = None,
    ) -> None:
        self.url = url
        self.api_key = api_key
        self.timeout = timeout
        self._session = session

    def _get_session(self) -> requests.Session:
        if self._session is None:
            self._session = requests.Session()
        return self._session

    def enhance_description(
        self,
        name: Optional[str],
        description: Optional[str],
        category: Optional[str],
    ) -> str:
        """Generate a new description for a product.

        Raises:
            EnhancementError: If the endpoint is not configured, the call fails or
                times out, or the response has no usable text
        """
        return self.generate(build_prompt(name, description, category))

    def generate(self, prompt: str) -> str:
        """POST a prompt and return the first generated choice."""
        if not self.url or not self.api_key:
            raise EnhancementError("Enhancement endpoint is not configured (ENHANCEMENT_URL / ENHANCEMENT_API_KEY)")

        try:
            resp = self._get_session().post(
                self.url,
                json={"prompt": prompt},
                headers={"Authorization": f"Bearer {self.api_key}"},
                timeout=self.timeout,
            )
            resp.raise_for_status()
        except requests.RequestException as e:
            log_catalog_event(
                "enhancement_failed",
                {"message": f"Enhancement request failed: {e}", "url": self.url},
                level=logging.ERROR,
                logger_name="enhancement",
            )
            raise EnhancementError("Error generating enhanced description") from e

        try:
            payload = resp.json()
        except ValueError as e:
            raise EnhancementError("Enhancement response is not valid JSON") from e

        return _extract_text(payload)
