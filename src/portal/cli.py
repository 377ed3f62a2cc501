"""Command line entry point: ask the matcher, classify a message or run the API."""

import argparse
import json
from typing import List, Optional

from .config import resolve_config
from .intents import classify_intent
from .loader import load_knowledge
from .logging_utils import build_logger
from .pipeline import QueryPipeline
from .store import PortalStore
from .types import Message


def _build_pipeline(args: argparse.Namespace) -> QueryPipeline:
    config = resolve_config(args.config)
    build_logger(config["logging"].get("level", "INFO"), config["logging"].get("dir"))
    knowledge = load_knowledge(args.knowledge or config["knowledge"].get("dir"))
    return QueryPipeline(config, knowledge, PortalStore(config))


def run_ask(args: argparse.Namespace) -> None:
    pipeline = _build_pipeline(args)
    if args.question:
        result = pipeline.respond(" ".join(args.question))
        print(json.dumps(result.as_payload(), indent=2, ensure_ascii=False))
        return

    history: List[Message] = []
    print("Support portal ready. Type 'exit' to quit.")
    while True:
        user_input = input("you> ").strip()
        if not user_input or user_input.lower() in {"exit", "quit"}:
            break
        result = pipeline.respond(user_input, history)
        print(f"bot> {result.answer}")
        print(f"     [{result.source} {result.source_id} {result.confidence}%]")
        history.append(Message(role="user", content=user_input))
        history.append(Message(role="assistant", content=result.answer))


def run_classify(args: argparse.Namespace) -> None:
    print(json.dumps(classify_intent(" ".join(args.message)).as_payload(), indent=2, ensure_ascii=False))


def run_serve(args: argparse.Namespace) -> None:
    import uvicorn

    from portal_server import create_app

    uvicorn.run(create_app(args.config, args.knowledge), host=args.host, port=args.port)


def main(argv: Optional[List[str]] = None) -> None:
    parser = argparse.ArgumentParser(description="AI support portal query matcher.")
    parser.add_argument("--config", default=None, help="Path to a JSON or YAML config file.")
    parser.add_argument("--knowledge", default=None, help="Directory holding the knowledge JSONL files.")
    sub = parser.add_subparsers(dest="command", required=True)

    ask = sub.add_parser("ask", help="Answer one question, or start an interactive session.")
    ask.add_argument("question", nargs="*")
    ask.set_defaults(func=run_ask)

    classify = sub.add_parser("classify", help="Classify a message into a support intent.")
    classify.add_argument("message", nargs="+")
    classify.set_defaults(func=run_classify)

    serve = sub.add_parser("serve", help="Run the HTTP API.")
    serve.add_argument("--host", default="0.0.0.0")
    serve.add_argument("--port", type=int, default=9000)
    serve.set_defaults(func=run_serve)

    args = parser.parse_args(argv)
    args.func(args)


if __name__ == "__main__":
    main()
