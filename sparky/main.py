"""
sparky entry point.
Interactive terminal chat over the conversation store.

Commands:
  /new            start a new conversation
  /list           list conversations
  /switch <id>    switch to a conversation
  /delete <id>    delete a conversation
  /clear          delete every conversation
  /quit           exit
"""

import asyncio
import logging
import os

from .ai.gemini_client import GeminiClient
from .ai.orchestrator import AgentOrchestrator
from .config import settings
from .constants import NOTES_KEY, SETTINGS_KEY
from .exceptions import SparkyError
from .logging_config import setup_logging
from .memory.conversations import ConversationStore
from .memory.kv_store import JsonFileStore, KeyValueStore
from .notebook import Notebook

logger = logging.getLogger(__name__)


def _print_conversations(store: ConversationStore) -> None:
    if not store.conversations:
        print("No conversations yet.")
        return
    for conv in store.conversations:
        marker = "*" if conv.id == store.current_conversation_id else " "
        print(f"{marker} {conv.id}  {conv.title}  ({len(conv.messages)} messages)")


async def _handle_command(line: str, store: ConversationStore) -> bool:
    """Run a slash command. Returns False when the REPL should exit."""
    command, _, arg = line.partition(" ")
    arg = arg.strip()
    match command:
        case "/quit":
            return False
        case "/new":
            conv_id = await store.create_conversation()
            print(f"Started conversation {conv_id}")
        case "/list":
            _print_conversations(store)
        case "/switch":
            if not store.select_conversation(arg):
                print(f"No conversation {arg!r}")
        case "/delete":
            if not await store.delete_conversation(arg):
                print(f"No conversation {arg!r}")
        case "/clear":
            await store.clear_all()
            print("All conversations deleted.")
        case _:
            print(f"Unknown command {command}")
    return True


async def _save_notebook(kv: KeyValueStore, notebook: Notebook) -> None:
    notes, app_settings = notebook.to_state()
    await kv.set(NOTES_KEY, notes)
    await kv.set(SETTINGS_KEY, app_settings)


async def _send(line: str, store: ConversationStore, kv: KeyValueStore, notebook: Notebook) -> None:
    """Send one chat line and print the reply. Failures are printed, not raised."""
    try:
        try:
            reply = await store.send_message(line)
        finally:
            await _save_notebook(kv, notebook)
    except SparkyError as e:
        print(f"! {getattr(e, 'user_message', None) or e}")
        return

    if reply is not None:
        if reply.function_call:
            print(f"  [{reply.function_call.name}]")
        print(reply.content)


async def run() -> None:
    kv = JsonFileStore(settings.store_dir)
    notebook = Notebook.from_state(await kv.get(NOTES_KEY), await kv.get(SETTINGS_KEY))

    client = GeminiClient()
    if not client.is_configured:
        logger.warning("GEMINI_API_KEY is not set; messages will fail until it is")

    store = ConversationStore(kv, AgentOrchestrator(client), notebook)
    await store.load()

    print("Sparky is ready. Type /quit to exit.")
    while True:
        try:
            line = (await asyncio.to_thread(input, "> ")).strip()
        except (EOFError, KeyboardInterrupt):
            break
        if not line:
            continue
        if line.startswith("/"):
            try:
                keep_going = await _handle_command(line, store)
            except SparkyError as e:
                print(f"! {e}")
                continue
            if not keep_going:
                break
            continue

        await _send(line, store, kv, notebook)


def main() -> None:
    os.makedirs(settings.data_dir, exist_ok=True)
    setup_logging(settings.log_level, settings.logs_dir, settings.json_logs)
    logger.info("Starting sparky (model=%s, data_dir=%s)", settings.gemini_model, settings.data_dir)
    asyncio.run(run())


if __name__ == "__main__":
    main()
