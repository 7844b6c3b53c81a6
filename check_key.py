#!/usr/bin/env python3
"""
Check that the configured OpenAI API key works.

Usage:
    python check_key.py
"""

import sys

from dotenv import load_dotenv

load_dotenv()

from chat.completions import CompletionClient, GenerationConfig
from chat.config import get_settings
from chat.errors import (
    ChatError,
    ProviderAuthError,
    ProviderRateLimited,
    ProviderUnavailable,
)
from chat.session_store import SessionStore
from chat.token_tracker import tracker
from chat.turns import TurnProcessor

HINTS = {
    ProviderAuthError: [
        "Problem: Invalid API key",
        "1. Go to: https://platform.openai.com/api-keys",
        "2. Generate a new API key",
        "3. Update your .env file (OPENAI_API_KEY=sk-...)",
    ],
    ProviderRateLimited: [
        "Problem: Rate limit exceeded or quota reached",
        "1. Check your usage: https://platform.openai.com/usage",
        "2. Wait a few minutes and try again",
    ],
    ProviderUnavailable: [
        "Problem: OpenAI unreachable or returned a server error",
        "1. Check your internet connection and any proxy/firewall",
        "2. Check OpenAI status: https://status.openai.com/",
        "3. Try again in a few minutes",
    ],
}


def main() -> int:
    settings = get_settings()
    print(f"\n{'═' * 60}")
    print("  OpenAI API Key Check")
    print(f"{'═' * 60}\n")

    if not settings.api_key_configured:
        print("OPENAI_API_KEY not found in environment or .env\n", file=sys.stderr)
        print("Add it to .env: OPENAI_API_KEY=sk-...")
        return 1

    print(f"API key found (first 10 chars): {settings.openai_api_key[:10]}...")
    print(f"Model: {settings.openai_model}\n")

    processor = TurnProcessor(
        SessionStore(),
        CompletionClient.from_settings(settings),
        GenerationConfig(model=settings.openai_model),
    )

    try:
        reply = processor.probe()
    except ChatError as e:
        print(f"ERROR: {e.error}", file=sys.stderr)
        if e.details:
            print(f"  {e.details}", file=sys.stderr)
        print()
        for line in HINTS.get(type(e), ["Unexpected error, see details above."]):
            print(line)
        return 1

    s = tracker.summary()
    print("SUCCESS! API is working.")
    print(f"Response: {reply}")
    print(f"Tokens used: {s['total_tokens']}")
    print("\nStart the server with: python server.py")
    return 0


if __name__ == "__main__":
    sys.exit(main())
