#!/usr/bin/env python3
"""
Terminal chat demo. Talks to the model through the same turn processor
the HTTP API uses.

Usage:
    python demo.py              # interactive REPL
    python demo.py --scripted   # run a short predefined conversation
"""

import sys

from dotenv import load_dotenv

load_dotenv()

from chat.completions import CompletionClient, GenerationConfig
from chat.config import get_settings
from chat.errors import ChatError
from chat.session_store import SessionStore
from chat.token_tracker import tracker
from chat.turns import TurnProcessor


def _send(processor: TurnProcessor, session_id: str, text: str) -> bool:
    try:
        result = processor.handle_message(session_id, text)
    except ChatError as e:
        print(f"  Error: {e.error}" + (f" ({e.details})" if e.details else ""), file=sys.stderr)
        return e.retryable
    print(f"assistant> {result.reply}")
    print(f"  [{result.model_used}, {result.total_tokens} tokens]")
    return True


def run_interactive(processor: TurnProcessor, session_id: str):
    print("\nType a message ('/clear' to reset, 'quit' to exit):\n")

    while True:
        try:
            text = input("you> ").strip()
        except (EOFError, KeyboardInterrupt):
            print()
            break

        if text.lower() in ("quit", "exit", "q"):
            break
        if text == "/clear":
            processor.clear_session(session_id)
            session_id = processor.init_session()
            print("  (conversation cleared)")
            continue
        if not text:
            continue

        if not _send(processor, session_id, text):
            break
        print()


SCRIPTED_MESSAGES = [
    "Hi! In one sentence, what can you help me with?",
    "Give me three names for a friendly houseplant.",
    "Which of those did you list second?",
]


def run_scripted(processor: TurnProcessor, session_id: str):
    for i, text in enumerate(SCRIPTED_MESSAGES, 1):
        print(f"\n{'═' * 60}")
        print(f"  Turn {i}: \"{text}\"")
        print(f"{'═' * 60}")

        if not _send(processor, session_id, text):
            break

    history = processor.get_history(session_id)
    print(f"\nHistory holds {len(history)} turns.")


def main():
    scripted = "--scripted" in sys.argv

    settings = get_settings()
    processor = TurnProcessor(
        SessionStore(),
        CompletionClient.from_settings(settings),
        GenerationConfig(model=settings.openai_model),
    )
    session_id = processor.init_session()
    print(f"Session {session_id} ready — model {settings.openai_model}.")

    if scripted:
        run_scripted(processor, session_id)
    else:
        run_interactive(processor, session_id)

    s = tracker.summary()
    print(f"\nToken usage: {s['total_calls']} API calls, {s['total_tokens']:,} tokens, "
          f"${s['total_cost_usd']:.6f} estimated cost")


if __name__ == "__main__":
    main()
