"""
TRANSFORMATION CHATBOT PACKAGE
==============================

Backend and chat client for generating record transformation helpers.

  from transformbot.main import create_app
  from transformbot.services.conversation import ConversationService

FILE STRUCTURE:
  transformbot/
    __init__.py   - This file; marks 'transformbot' as a package.
    config.py     - Settings loaded from the environment, fixed system instruction.
    errors.py     - Exceptions and their HTTP mapping.
    main.py       - FastAPI app and HTTP endpoints (/complete, /health).
    models.py     - Pydantic models: HTTP bodies, session state, user actions, next steps.
    chat_cli.py   - Terminal chat front-end.
    services/     - Completion, suggestion lookup, conversation and chat controller logic.
"""
