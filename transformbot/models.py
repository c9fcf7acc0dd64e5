"""
DATA MODELS MODULE
==================

Pydantic models for the HTTP contract, the chat session state, search hits,
and the two tagged unions that drive the conversation.

MODELS:
  CompletionRequest   - Body of POST /complete (prompt, non-blank after trim).
  CompletionResponse  - Successful body of POST /complete (output_text).
  ErrorResponse       - Error body of POST /complete (error).
  Message             - One transcript entry (from "user" or "bot", text, optional code).
  SessionState        - Per-session conversation state; immutable, every turn builds a new one.
  SuggestionRecord    - One hit from the search index (objectID, title, code, extra fields kept).
  UserAction          - FreeText | SuggestionPicked.
  NextStep            - AskForDescription | RequestMoreInfo | ShowExisting | GenerateNew.
"""

from typing import Annotated, Any, Dict, Literal, Optional, Tuple, Union

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator


# ==============================================================================
# COMPLETION ENDPOINT
# ==============================================================================

class CompletionRequest(BaseModel):
    """
    Request body for POST /complete.

    The prompt is forwarded to the model exactly as sent; trimming is only used
    to reject blank prompts.
    """
    prompt: str

    @field_validator("prompt")
    @classmethod
    def prompt_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("prompt must not be blank")
        return value


class CompletionResponse(BaseModel):
    output_text: str


class ErrorResponse(BaseModel):
    error: str


# ==============================================================================
# TRANSCRIPT AND SESSION STATE
# ==============================================================================

class Message(BaseModel):
    """
    A single transcript entry. Never mutated after it is appended; order in
    SessionState.history defines chronology.
    """
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    from_: Literal["user", "bot"] = Field(alias="from")
    text: str
    code: Optional[str] = None


class SessionState(BaseModel):
    """
    Conversation state for one chat session. Held in memory only.

    intent: None until the bot has asked for clarification once, then True.
    entities: slot name -> value; "transformationRequest" holds the latest description.
    transformations: may hold "code", an already-resolved transformation.
    """
    model_config = ConfigDict(frozen=True)

    user_id: str = "123"
    history: Tuple[Message, ...] = ()
    intent: Optional[bool] = None
    entities: Dict[str, str] = Field(default_factory=dict)
    transformations: Dict[str, str] = Field(default_factory=dict)


# ==============================================================================
# SEARCH HITS
# ==============================================================================

class SuggestionRecord(BaseModel):
    """A search hit. Fields beyond id/title/code are kept untouched."""
    model_config = ConfigDict(extra="allow")

    id: str = Field(validation_alias=AliasChoices("objectID", "id"))
    title: str = ""
    code: Optional[str] = None

    @field_validator("id", mode="before")
    @classmethod
    def id_as_string(cls, value: Any) -> str:
        return str(value)


# ==============================================================================
# USER ACTIONS (tagged union)
# ==============================================================================

class FreeText(BaseModel):
    """Text typed by the user and submitted. Starts a fresh topic."""
    model_config = ConfigDict(frozen=True)

    kind: Literal["free_text"] = "free_text"
    text: str


class SuggestionPicked(BaseModel):
    """The user clicked one of the suggestions shown under the input."""
    model_config = ConfigDict(frozen=True)

    kind: Literal["suggestion_picked"] = "suggestion_picked"
    record: SuggestionRecord


UserAction = Annotated[Union[FreeText, SuggestionPicked], Field(discriminator="kind")]


# ==============================================================================
# NEXT STEP (tagged union)
# ==============================================================================

class AskForDescription(BaseModel):
    step: Literal["ask_transformation_description"] = "ask_transformation_description"


class RequestMoreInfo(BaseModel):
    step: Literal["get_more_information"] = "get_more_information"


class ShowExisting(BaseModel):
    step: Literal["show_existing_transformation"] = "show_existing_transformation"
    code: str


class GenerateNew(BaseModel):
    step: Literal["generate_new_transformation"] = "generate_new_transformation"
    description: str


NextStep = Annotated[
    Union[AskForDescription, RequestMoreInfo, ShowExisting, GenerateNew],
    Field(discriminator="step"),
]
