"""
SERVICES PACKAGE
=================

Business logic lives here. The API layer (transformbot.main) and the chat
front-end call these services; only the two HTTP clients talk to the network.

MODULES:
    completion_service - Prompt + fixed system instruction -> Groq chat model -> text (server side)
    completion_client  - HTTP client for POST /complete (chat side)
    suggestion_service - Search index lookup for existing transformations
    conversation       - Next-step state machine and bot replies
    chat_controller    - Chat widget state: input, suggestions, loading, transcript
"""
