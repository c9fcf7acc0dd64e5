"""
CHAT CONTROLLER MODULE
======================

UI-agnostic chat widget logic: keeps the session state, the current input,
the suggestion list and the loading flag, and wires user events to the
SuggestionLookup and the ConversationService.

EVENTS:
  on_input_change(text) - run a suggestion lookup for the new input. Every
                          lookup gets a sequence number; a result is applied
                          only if no newer lookup was issued meanwhile.
  submit(action)        - free text or picked suggestion: loading on, one
                          conversation turn, loading off, input and
                          suggestions cleared, on_update() called.

The lookup and the conversation turn use blocking HTTP clients, so both run
in a worker thread while the event loop stays responsive.
"""

import asyncio
import itertools
import logging
from typing import Callable, List, Optional

from transformbot.models import SessionState, SuggestionRecord, UserAction
from transformbot.services.conversation import ConversationService
from transformbot.services.suggestion_service import SuggestionLookup

logger = logging.getLogger("transformbot")


class ChatController:
    def __init__(
        self,
        lookup: SuggestionLookup,
        conversation: ConversationService,
        user_id: str = "123",
        on_update: Optional[Callable[["ChatController"], None]] = None,
    ):
        self.lookup = lookup
        self.conversation = conversation
        self.state = SessionState(user_id=user_id)
        self.input = ""
        self.suggestions: List[SuggestionRecord] = []
        self.loading = False
        self.on_update = on_update
        self._sequence = itertools.count(1)
        self._latest_lookup = 0

    def reset(self):
        """Start a new session (same as reloading the page)."""
        self.state = SessionState(user_id=self.state.user_id)
        self.input = ""
        self.suggestions = []
        self.loading = False

    async def on_input_change(self, text: str) -> bool:
        """
        Look up suggestions for text. Returns False if the result arrived after
        a newer lookup had been issued and was therefore dropped.
        """
        self.input = text
        sequence = next(self._sequence)
        self._latest_lookup = sequence

        results = await asyncio.to_thread(self.lookup.search, text)

        if sequence != self._latest_lookup:
            logger.debug(f"Dropping stale suggestions for lookup #{sequence}")
            return False
        self.suggestions = results
        return True

    async def submit(self, action: UserAction) -> SessionState:
        self.loading = True
        self._notify()
        try:
            self.state = await asyncio.to_thread(self.conversation.respond, self.state, action)
        finally:
            self.loading = False

        self.input = ""
        self.suggestions = []
        # Invalidate lookups still in flight so they cannot refill the cleared list.
        self._latest_lookup = next(self._sequence)
        self._notify()
        return self.state

    def _notify(self):
        if self.on_update:
            self.on_update(self)
