"""
TRANSFORMATION CHATBOT - Terminal Chat
======================================

PURPOSE:
Command-line chat widget for the transformation chatbot. It plays the part of
the browser widget: type a description, pick one of the existing
transformations found in the search index, or let the backend generate a new
one.

USAGE:
    transformbot-chat            (or: python -m transformbot.chat_cli)

    Start the backend first: python run.py

HOW IT WORKS:
1. Each line you type is looked up in the search index (at least 2 characters).
2. If matches are found they are listed with numbers; enter a number to pick
   one, or press Enter to send your text as a new request.
3. The bot answers with an existing transformation, asks for more detail, or
   shows an AI generated one from the backend.

COMMANDS:
    /history - Show the whole transcript
    /clear   - Start a new session
    /quit or /exit - Exit
"""

import asyncio
import logging
from typing import Optional

from transformbot.config import load_client_settings
from transformbot.models import FreeText, Message, SuggestionPicked
from transformbot.services.chat_controller import ChatController
from transformbot.services.completion_client import CompletionClient
from transformbot.services.conversation import ConversationService
from transformbot.services.suggestion_service import SuggestionLookup, build_search_client

BOT_NAME = "Algolia AI"
LOADING_TEXT = "Generating transformation..."


# -----------------------------------------------------------------------------
# UI HELPERS
# -----------------------------------------------------------------------------

def print_header():
    print("\n" + "=" * 60)
    print("🤖 Algolia Transformations Chatbot")
    print("=" * 60)
    print("\nStart typing to find existing data transformations or generate a new one")
    print("\nCommands:")
    print("  /history - See chat history")
    print("  /clear - Start new session")
    print("  /quit - Exit")
    print("=" * 60 + "\n")


def get_user_input(prompt: str = "\nYou: ") -> Optional[str]:
    try:
        return input(prompt).strip()
    except (KeyboardInterrupt, EOFError):
        return None


def format_message(message: Message) -> str:
    name = BOT_NAME if message.from_ == "bot" else "You"
    text = f"{name}: {message.text}"
    if message.code:
        text += f"\n{message.code}\n"
    return text


def format_history(controller: ChatController) -> str:
    history = controller.state.history
    if not history:
        return "No messages in this session"

    output = f"\n📜 Chat History ({len(history)} messages):\n"
    output += "-" * 60 + "\n"
    for i, message in enumerate(history, 1):
        output += f"{i}. {format_message(message)}\n"
    output += "-" * 60 + "\n"
    return output


def render(controller: ChatController):
    """Redraw after each controller update: loading line, or the newest bot reply."""
    if controller.loading:
        print(f"⏳ {LOADING_TEXT}")
    elif controller.state.history:
        print(format_message(controller.state.history[-1]))


# -----------------------------------------------------------------------------
# CHAT LOOP
# -----------------------------------------------------------------------------

async def choose_action(controller: ChatController, text: str):
    """Look up suggestions for text and let the user pick one or send the text."""
    if not text:
        return FreeText(text=text)

    await controller.on_input_change(text)
    if not controller.suggestions:
        return FreeText(text=text)

    print("\n🔎 Existing transformations:")
    for i, suggestion in enumerate(controller.suggestions, 1):
        print(f"  {i}. {suggestion.title}")

    choice = await asyncio.to_thread(
        get_user_input, "Pick a number, or press Enter to send your text: "
    )
    if choice and choice.isdigit() and 1 <= int(choice) <= len(controller.suggestions):
        return SuggestionPicked(record=controller.suggestions[int(choice) - 1])
    return FreeText(text=text)


async def chat_loop(controller: ChatController):
    print_header()

    while True:
        user_input = await asyncio.to_thread(get_user_input)
        if user_input is None or user_input in ["/quit", "/exit"]:
            print("\n👋 Goodbye!")
            break

        if user_input == "/history":
            print(format_history(controller))
            continue

        if user_input == "/clear":
            controller.reset()
            print("\n🔄 Session cleared. Starting fresh!")
            continue

        if user_input.startswith("/"):
            print(f"❌ Unknown command: {user_input}")
            continue

        action = await choose_action(controller, user_input)
        await controller.submit(action)


def build_controller() -> ChatController:
    settings = load_client_settings()
    lookup = SuggestionLookup(
        build_search_client(settings),
        settings.index_name,
        hits_per_page=settings.hits_per_page,
    )
    conversation = ConversationService(CompletionClient(settings.backend_url))
    return ChatController(lookup, conversation, on_update=render)


def main():
    logging.basicConfig(level=logging.WARNING, format="%(levelname)s | %(name)s | %(message)s")
    try:
        asyncio.run(chat_loop(build_controller()))
    except KeyboardInterrupt:
        print("\n\n👋 Goodbye!")


if __name__ == "__main__":
    main()
