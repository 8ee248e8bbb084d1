"""Entry point: ``python -m streamchat serve`` or ``python -m streamchat chat``."""

import argparse
from pathlib import Path

from streamchat.core.config import HOST, PORT, SERVER_URL
from streamchat.models.chat import MODELS


def main(argv=None):
    parser = argparse.ArgumentParser(prog="streamchat", description="Streaming chat relay")
    subparsers = parser.add_subparsers(dest="command")

    serve_parser = subparsers.add_parser("serve", help="Run the relay server")
    serve_parser.add_argument("--host", default=HOST, help=f"Interface to bind (default: {HOST})")
    serve_parser.add_argument("-p", "--port", type=int, default=PORT,
                              help=f"Port to run on (default: {PORT})")

    chat_parser = subparsers.add_parser("chat", help="Chat with a running server from the terminal")
    chat_parser.add_argument("--url", default=SERVER_URL, help=f"Server URL (default: {SERVER_URL})")
    chat_parser.add_argument("-m", "--model", choices=MODELS, default=MODELS[0])
    chat_parser.add_argument("-s", "--system", default="", help="System prompt")
    chat_parser.add_argument("--transcript", type=Path,
                             help="Write the conversation as HTML to this file on exit")

    args = parser.parse_args(argv)

    if args.command == "serve":
        import uvicorn
        uvicorn.run("streamchat.main:create_app", factory=True, host=args.host, port=args.port)
    elif args.command == "chat":
        from streamchat.client.console import ChatSession, run_repl
        run_repl(ChatSession(args.url, model=args.model, system=args.system), args.transcript)
    else:
        parser.print_help()


if __name__ == "__main__":
    main()
