"""
COMPLETION CLIENT MODULE
========================

HTTP client the chat side uses to reach POST /complete on the backend.
One request per call, no retries.
"""

import logging
from typing import Optional

import requests

logger = logging.getLogger("transformbot")


class CompletionClientError(Exception):
    """The backend could not be reached or did not answer with 2xx."""


class CompletionClient:
    def __init__(
        self,
        base_url: str,
        session: Optional[requests.Session] = None,
        timeout: Optional[float] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.session = session or requests.Session()
        self.timeout = timeout

    def generate(self, description: str) -> Optional[str]:
        """
        Ask the backend for a transformation helper.

        Returns output_text from the response (may be empty or None if the
        backend sent no text). Raises CompletionClientError on transport
        failures and non-2xx statuses.
        """
        try:
            response = self.session.post(
                f"{self.base_url}/complete",
                json={"prompt": description},
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            raise CompletionClientError(str(e)) from e

        if not response.ok:
            raise CompletionClientError(f"Response status: {response.status_code}")

        try:
            data = response.json()
        except ValueError as e:
            raise CompletionClientError("Response body is not JSON") from e
        return data.get("output_text") if isinstance(data, dict) else None
