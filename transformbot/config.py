"""
CONFIGURATION MODULE
====================

PURPOSE:
  One explicit settings object for the whole project: model API key, listening
  port, model parameters, search index credentials, and the fixed system
  instruction sent with every completion request.

WHAT THIS FILE DOES:
  - Loads environment variables from .env (so API keys stay out of code).
  - Builds a frozen Settings dataclass from the environment, validated once.
  - Refuses to build server settings when GROQ_API_KEY is missing (ConfigError).
  - Holds SYSTEM_INSTRUCTION, which is never modified at runtime.

USAGE:
  settings = load_settings()          # server (needs GROQ_API_KEY)
  settings = load_client_settings()   # chat client (search + backend URL only)
  Components receive the settings (or the values they need) explicitly.
"""

import logging
import os
from dataclasses import dataclass
from typing import Mapping, Optional, Tuple

from dotenv import load_dotenv

from transformbot.errors import ConfigError


logger = logging.getLogger("transformbot")


# -----------------------------------------------------------------------------
# DEFAULTS
# -----------------------------------------------------------------------------
DEFAULT_PORT = 3002
DEFAULT_HOST = "0.0.0.0"
DEFAULT_MODEL = "llama-3.3-70b-versatile"
DEFAULT_INDEX_NAME = "prod_transformations_en"
DEFAULT_BACKEND_URL = f"http://localhost:{DEFAULT_PORT}"

# Sampling stays at the provider defaults (non-zero randomness); output is bounded.
DEFAULT_TEMPERATURE = 1.0
DEFAULT_MAX_OUTPUT_TOKENS = 2048

# Unset: the index decides the page size.
DEFAULT_HITS_PER_PAGE: Optional[int] = None


# ============================================================================
# SYSTEM INSTRUCTION
# ============================================================================
# Sent as the system message on every /complete call. The user prompt is the
# only variable input, so this text must stay byte-identical across requests.

SYSTEM_INSTRUCTION = """You are an assistant adept at taking in a prompt and outputting a helper function that can support tasks that may include hydration, manipulation, and deletion of attributes, with respect to Algolia JSON records.

# Output Format

Provide a structured and clear code snippet. The snippet must be framed with respect to a hypothetical agnostic Algolia record that is JSON, and with respect to the ecommerce vertical. Provide only the code snippet; no description needed. you do not need to share example usage (e.g. with the JSON record) or any other information.

The response should "only include a JSON of the sample javascript helper function that would accomplish the source prompt".
"""


# ============================================================================
# SETTINGS
# ============================================================================

@dataclass(frozen=True)
class Settings:
    # Server
    api_key: str = ""
    port: int = DEFAULT_PORT
    host: str = DEFAULT_HOST
    log_level: str = "INFO"
    cors_origins: Tuple[str, ...] = ("*",)

    # Model
    model: str = DEFAULT_MODEL
    temperature: float = DEFAULT_TEMPERATURE
    max_output_tokens: int = DEFAULT_MAX_OUTPUT_TOKENS

    # Search index
    search_app_id: str = ""
    search_api_key: str = ""
    index_name: str = DEFAULT_INDEX_NAME
    hits_per_page: Optional[int] = DEFAULT_HITS_PER_PAGE

    # Chat client
    backend_url: str = DEFAULT_BACKEND_URL


def _get(env: Mapping[str, str], name: str, default: str = "") -> str:
    return (env.get(name) or default).strip()


def _get_int(env: Mapping[str, str], name: str, default: Optional[int]) -> Optional[int]:
    raw = _get(env, name)
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        raise ConfigError(f"{name} must be an integer, got {raw!r}")


def _get_float(env: Mapping[str, str], name: str, default: float) -> float:
    raw = _get(env, name)
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError:
        raise ConfigError(f"{name} must be a number, got {raw!r}")


def _read_environment(env: Optional[Mapping[str, str]]) -> Mapping[str, str]:
    if env is not None:
        return env
    # .env is only consulted when reading the real process environment.
    load_dotenv()
    return os.environ


def _build(env: Mapping[str, str], api_key: str) -> Settings:
    origins = tuple(
        origin.strip()
        for origin in _get(env, "CORS_ORIGINS", "*").split(",")
        if origin.strip()
    )
    return Settings(
        api_key=api_key,
        port=_get_int(env, "PORT", DEFAULT_PORT),
        host=_get(env, "HOST", DEFAULT_HOST),
        log_level=_get(env, "LOG_LEVEL", "INFO").upper(),
        cors_origins=origins or ("*",),
        model=_get(env, "GROQ_MODEL", DEFAULT_MODEL),
        temperature=_get_float(env, "TEMPERATURE", DEFAULT_TEMPERATURE),
        max_output_tokens=_get_int(env, "MAX_OUTPUT_TOKENS", DEFAULT_MAX_OUTPUT_TOKENS),
        search_app_id=_get(env, "ALGOLIA_APP_ID"),
        search_api_key=_get(env, "ALGOLIA_SEARCH_API_KEY"),
        index_name=_get(env, "ALGOLIA_INDEX_NAME", DEFAULT_INDEX_NAME),
        hits_per_page=_get_int(env, "SUGGESTION_HITS", DEFAULT_HITS_PER_PAGE),
        backend_url=_get(env, "BACKEND_URL", DEFAULT_BACKEND_URL).rstrip("/"),
    )


def load_settings(env: Optional[Mapping[str, str]] = None) -> Settings:
    """
    Build server settings from the environment.

    Raises ConfigError if GROQ_API_KEY is missing or blank, or if a numeric
    variable cannot be parsed. Called once at startup; the result is passed to
    the components that need it.
    """
    env = _read_environment(env)
    api_key = _get(env, "GROQ_API_KEY")
    if not api_key:
        raise ConfigError("GROQ_API_KEY is not set.")

    settings = _build(env, api_key)
    if settings.max_output_tokens <= 0:
        raise ConfigError("MAX_OUTPUT_TOKENS must be positive")
    return settings


def load_client_settings(env: Optional[Mapping[str, str]] = None) -> Settings:
    """Settings for the chat client: search credentials and backend URL, no model key."""
    env = _read_environment(env)
    settings = _build(env, api_key="")
    if not (settings.search_app_id and settings.search_api_key):
        logger.warning("ALGOLIA_APP_ID / ALGOLIA_SEARCH_API_KEY not set. Suggestions will be empty.")
    return settings


def mask_secret(value: str) -> str:
    """Show only the last 4 characters of a key, e.g. '****abcd'."""
    if not value:
        return "<unset>"
    if len(value) <= 4:
        return "*" * len(value)
    return "*" * 4 + value[-4:]
