"""
CONVERSATION SERVICE MODULE
===========================

Decides what the bot says next and threads the session state through each turn.

STEPS (checked in this order, first match wins):
  1. AskForDescription  - no description yet, or shorter than MIN_DESCRIPTION_LENGTH.
  2. ShowExisting       - a suggestion was picked, so transformations["code"] is set.
  3. RequestMoreInfo    - clarification not asked yet (intent unset) and earlier turns exist.
  4. GenerateNew        - ask the completion backend for a new transformation.

evaluate_next_step() only looks at the state. ConversationService.respond()
applies the user's action, evaluates the step against the turns that came
before it, builds exactly one bot message, and returns the new state with the
user and bot messages appended.
"""

import logging
from typing import Any, Tuple

from transformbot.models import (
    AskForDescription,
    FreeText,
    GenerateNew,
    Message,
    NextStep,
    RequestMoreInfo,
    SessionState,
    ShowExisting,
    SuggestionPicked,
    UserAction,
)

logger = logging.getLogger("transformbot")

MIN_DESCRIPTION_LENGTH = 6
TRANSFORMATION_REQUEST = "transformationRequest"

ASK_DESCRIPTION_TEXT = "What kind of transformation are you trying to accomplish?"
MORE_INFO_TEXT = (
    "Can you describe in detail what transformation you want and I can generate one for you?"
)
SHOW_EXISTING_TEXT = "I found a transformation that matches your request:\n"
GENERATED_TEXT = "Here's a AI generated transformation based on your request:"
NO_TRANSFORMATION_CODE = "// No transformation found. Please try again."


# ==============================================================================
# STATE TRANSITIONS
# ==============================================================================

def evaluate_next_step(state: SessionState) -> NextStep:
    description = state.entities.get(TRANSFORMATION_REQUEST)
    if not description or len(description) < MIN_DESCRIPTION_LENGTH:
        return AskForDescription()

    code = state.transformations.get("code")
    if code:
        return ShowExisting(code=code)

    if not state.intent and state.history:
        return RequestMoreInfo()

    return GenerateNew(description=description)


def apply_user_action(state: SessionState, action: UserAction) -> Tuple[SessionState, Message]:
    """
    Fold a user action into the state and build the user's transcript message.

    Free text starts a fresh topic (entities and transformations cleared); a
    picked suggestion keeps the entities and carries its code. Either way the
    shown text becomes the current transformation request. The returned state's
    history does not include the new message yet.
    """
    if isinstance(action, SuggestionPicked):
        text = action.record.title
        entities = dict(state.entities)
        # The picked record's code replaces any earlier one, even when it has none.
        transformations = {k: v for k, v in state.transformations.items() if k != "code"}
        if action.record.code:
            transformations["code"] = action.record.code
    elif isinstance(action, FreeText):
        text = action.text
        entities = {}
        transformations = {}
    else:
        raise TypeError(f"Unsupported user action: {action!r}")

    entities[TRANSFORMATION_REQUEST] = text
    updated = state.model_copy(update={"entities": entities, "transformations": transformations})
    return updated, Message(from_="user", text=text)


# ==============================================================================
# CONVERSATION SERVICE CLASS
# ==============================================================================

class ConversationService:
    """
    Produces one bot reply per user action.

    generator is any object with generate(description) -> Optional[str]; in the
    chat client it is a CompletionClient talking to POST /complete.
    """

    def __init__(self, generator: Any):
        self.generator = generator

    def respond(self, state: SessionState, action: UserAction) -> SessionState:
        prepared, user_message = apply_user_action(state, action)
        step = evaluate_next_step(prepared)
        logger.info(f"Next step: {step.step}")

        prepared, bot_message = self.build_bot_message(prepared, step)
        return prepared.model_copy(
            update={"history": prepared.history + (user_message, bot_message)}
        )

    def build_bot_message(self, state: SessionState, step: NextStep) -> Tuple[SessionState, Message]:
        if isinstance(step, AskForDescription):
            return state, Message(from_="bot", text=ASK_DESCRIPTION_TEXT)

        if isinstance(step, RequestMoreInfo):
            # Only ask once; the next description goes straight to generation.
            return state.model_copy(update={"intent": True}), Message(from_="bot", text=MORE_INFO_TEXT)

        if isinstance(step, ShowExisting):
            return state, Message(from_="bot", text=SHOW_EXISTING_TEXT, code=step.code)

        code = self.generate_code(step.description)
        return state, Message(from_="bot", text=GENERATED_TEXT, code=code)

    def generate_code(self, description: str) -> str:
        """Call the generator once; failures and empty answers become code comments."""
        try:
            code = self.generator.generate(description)
        except Exception as e:
            logger.error(f"Error generating transformation: {e}")
            return f"// Error generating transformation: {e}"
        return code or NO_TRANSFORMATION_CODE
