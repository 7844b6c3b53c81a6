#!/usr/bin/env python3
"""
Run the chat API with uvicorn.

Usage:
    python server.py              # start on $PORT (default 8000)
    python server.py --port 3000  # custom port
"""

from dotenv import load_dotenv

load_dotenv()

from chat.config import get_settings


def main():
    import argparse
    import uvicorn

    settings = get_settings()

    parser = argparse.ArgumentParser()
    parser.add_argument("--port", type=int, default=settings.port)
    parser.add_argument("--host", default=settings.host)
    args = parser.parse_args()

    print(f"\n{'═' * 50}")
    print("  Chat API")
    print(f"{'═' * 50}")
    print(f"  Server:       http://localhost:{args.port}")
    print(f"  Health check: http://localhost:{args.port}/api/health")
    print(f"  Key test:     http://localhost:{args.port}/api/test")
    print(f"  Model:        {settings.openai_model}")
    print(f"{'═' * 50}\n")

    uvicorn.run("api.main:app", host=args.host, port=args.port, reload=False)


if __name__ == "__main__":
    main()
