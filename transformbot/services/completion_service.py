"""
COMPLETION SERVICE MODULE
=========================

Turns one user prompt into one generated transformation snippet. Used by
POST /complete.

FLOW:
  1. Build exactly two messages: the fixed SYSTEM_INSTRUCTION and the prompt.
  2. Call the chat model once (no retries; the client is built with max_retries=0).
  3. Return the message content if it is a string, otherwise treat the answer
     as a broken upstream contract.

The chat model is passed in, so tests can hand over any object with an
invoke(messages) method instead of a real Groq client.
"""

import logging
from typing import Any, List

from langchain_core.messages import BaseMessage, HumanMessage, SystemMessage

from transformbot.config import SYSTEM_INSTRUCTION, Settings
from transformbot.errors import UpstreamContractError, UpstreamTransportError

logger = logging.getLogger("transformbot")


def build_chat_model(settings: Settings):
    """Create the Groq chat model from settings. Imported lazily so tests never need a key."""
    from langchain_groq import ChatGroq

    return ChatGroq(
        api_key=settings.api_key,
        model=settings.model,
        temperature=settings.temperature,
        max_tokens=settings.max_output_tokens,
        max_retries=0,
    )


# ==============================================================================
# COMPLETION SERVICE CLASS
# ==============================================================================

class CompletionService:
    """Single-attempt prompt -> text call against the injected chat model."""

    def __init__(self, llm: Any):
        self.llm = llm

    @staticmethod
    def build_messages(prompt: str) -> List[BaseMessage]:
        return [
            SystemMessage(content=SYSTEM_INSTRUCTION),
            HumanMessage(content=prompt),
        ]

    def complete(self, prompt: str) -> str:
        """
        Send the prompt with the system instruction and return the generated text.

        Raises:
            UpstreamTransportError: the model call raised (network, auth, rate limit...).
            UpstreamContractError: the answer has no textual content.
        """
        messages = self.build_messages(prompt)
        try:
            response = self.llm.invoke(messages)
        except Exception as e:
            logger.error(f"Completion request failed: {e}", exc_info=True)
            raise UpstreamTransportError(str(e)) from e

        output_text = getattr(response, "content", None)
        if not isinstance(output_text, str):
            logger.error(
                "Completion response has no text content (got %s): %r",
                type(output_text).__name__,
                response,
            )
            raise UpstreamContractError("output_text is missing or not a string")

        logger.info(f"Completion generated ({len(output_text)} chars)")
        return output_text
