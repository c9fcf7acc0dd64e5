import asyncio

from transformbot import chat_cli
from transformbot.models import FreeText, Message, SuggestionPicked
from transformbot.services.chat_controller import ChatController
from transformbot.services.conversation import ConversationService
from transformbot.services.suggestion_service import SuggestionLookup

HITS = [
    {"objectID": "t-1", "title": "Add discount attribute", "code": "function g(r){ return r; }"},
    {"objectID": "t-2", "title": "Remove SKU field", "code": "function f(r){ delete r.sku; }"},
]


def make_controller(make_search_client, fake_generator, hits=HITS):
    lookup = SuggestionLookup(make_search_client(hits=hits), "prod_transformations_en")
    return ChatController(lookup, ConversationService(fake_generator))


def test_picking_a_number_selects_that_suggestion(monkeypatch, make_search_client, fake_generator):
    monkeypatch.setattr(chat_cli, "get_user_input", lambda prompt="": "2")
    controller = make_controller(make_search_client, fake_generator)

    action = asyncio.run(chat_cli.choose_action(controller, "remove sku"))

    assert isinstance(action, SuggestionPicked)
    assert action.record.id == "t-2"


def test_enter_sends_typed_text(monkeypatch, make_search_client, fake_generator):
    monkeypatch.setattr(chat_cli, "get_user_input", lambda prompt="": "")
    controller = make_controller(make_search_client, fake_generator)

    action = asyncio.run(chat_cli.choose_action(controller, "remove sku"))

    assert action == FreeText(text="remove sku")


def test_no_suggestions_sends_text_directly(monkeypatch, make_search_client, fake_generator):
    def unexpected_prompt(prompt=""):
        raise AssertionError("should not ask for a choice")

    monkeypatch.setattr(chat_cli, "get_user_input", unexpected_prompt)
    controller = make_controller(make_search_client, fake_generator, hits=[])

    action = asyncio.run(chat_cli.choose_action(controller, "discount attribute"))

    assert action == FreeText(text="discount attribute")


def test_chat_loop_runs_a_turn(monkeypatch, capsys, make_search_client, fake_generator):
    inputs = iter(["discount attribute", "/history", "/quit"])
    monkeypatch.setattr(chat_cli, "get_user_input", lambda prompt="": next(inputs))
    controller = make_controller(make_search_client, fake_generator, hits=[])
    controller.on_update = chat_cli.render

    asyncio.run(chat_cli.chat_loop(controller))

    out = capsys.readouterr().out
    assert chat_cli.LOADING_TEXT in out
    assert fake_generator.output in out
    assert "Chat History (2 messages)" in out


def test_format_message_labels_speakers():
    assert chat_cli.format_message(Message(from_="user", text="hi")) == "You: hi"
    bot = chat_cli.format_message(Message(from_="bot", text="Here:", code="function f(){}"))
    assert bot.startswith("Algolia AI: Here:")
    assert "function f(){}" in bot
