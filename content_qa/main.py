#!/usr/bin/env python3
"""
Content Q&A command line

Examples:
    content-qa ingest https://react.dev/learn
    content-qa ingest-text https://example.com/notes notes.txt --title "My notes"
    content-qa ask "What is React?"
    content-qa search "react hooks" -n 3
    content-qa list
    content-qa stats
    content-qa serve --port 8000

Configuration comes from .env / environment variables (see content_qa.config).
"""

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Optional

from .config import AppConfig
from .exceptions import ContentQAError, VectorStoreError
from .logging_config import setup_logging
from .service import ContentQAService

logger = logging.getLogger(__name__)


def _print_json(data) -> None:
    print(json.dumps(data, indent=2, ensure_ascii=False))


def cmd_ingest(service: ContentQAService, args: argparse.Namespace) -> int:
    for url in args.urls:
        item = service.ingest(url)
        print(f"  {item.id}  {item.title}  ({item.total_chunks} chunks)  {item.url}")
    return 0


def cmd_ingest_text(service: ContentQAService, args: argparse.Namespace) -> int:
    path = Path(args.file)
    if not path.exists():
        print(f"File not found: {path}", file=sys.stderr)
        return 1
    item = service.ingest_text(args.url, args.title or "", path.read_text(encoding="utf-8"))
    print(f"  {item.id}  {item.title}  ({item.total_chunks} chunks)")
    return 0


def cmd_search(service: ContentQAService, args: argparse.Namespace) -> int:
    hits = service.search(args.query, args.n_results)
    if not hits:
        print("  No results.")
        return 0
    for i, hit in enumerate(hits, 1):
        chunk = hit.chunk
        preview = chunk.content[:150].replace("\n", " ")
        print(f"\n  --- Result {i} ({hit.source}, relevance {hit.relevance:.2f}) ---")
        print(f"  {chunk.title} - chunk {chunk.chunk_index + 1}")
        print(f"  {chunk.url}")
        print(f"  {preview}...")
    return 0


def cmd_ask(service: ContentQAService, args: argparse.Namespace) -> int:
    response = service.answer_question(args.question)
    if args.json:
        _print_json(response.model_dump())
        return 0
    print(f"\n{response.answer}\n")
    for source in response.sources:
        print(f"  [{source.relevance:.2f}] {source.title} (chunk {source.chunk_index + 1}) {source.url}")
    return 0


def cmd_list(service: ContentQAService, args: argparse.Namespace) -> int:
    items = service.list_content()
    if not items:
        print("  No content ingested yet.")
    for item in items:
        print(f"  {item.id}  {item.created_at}  {item.title}  ({item.total_chunks} chunks)  {item.url}")
    return 0


def cmd_delete(service: ContentQAService, args: argparse.Namespace) -> int:
    if service.delete_content(args.content_id):
        print(f"  Deleted {args.content_id}")
        return 0
    print(f"  Not found: {args.content_id}", file=sys.stderr)
    return 1


def cmd_stats(service: ContentQAService, args: argparse.Namespace) -> int:
    _print_json(service.stats().model_dump())
    return 0


def cmd_health(service: ContentQAService, args: argparse.Namespace) -> int:
    report = service.health()
    _print_json(report.model_dump())
    return 0 if report.healthy else 1


def cmd_history(service: ContentQAService, args: argparse.Namespace) -> int:
    for record in service.query_history(args.limit):
        print(f"  {record.timestamp}  {record.question}")
        print(f"      {record.answer[:120]}")
    return 0


def cmd_clear(service: ContentQAService, args: argparse.Namespace) -> int:
    if not args.yes:
        print("Refusing to clear without --yes", file=sys.stderr)
        return 1
    service.clear_all()
    print("  All content, chunks and history deleted.")
    return 0


COMMANDS = {
    "ingest": cmd_ingest,
    "ingest-text": cmd_ingest_text,
    "search": cmd_search,
    "ask": cmd_ask,
    "list": cmd_list,
    "delete": cmd_delete,
    "stats": cmd_stats,
    "health": cmd_health,
    "history": cmd_history,
    "clear": cmd_clear,
}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="content-qa",
        description="Ingest web content and ask questions about it",
    )
    parser.add_argument("--data-dir", default=None, help="ChromaDB directory (overrides CONTENT_QA_DATA_DIR)")
    parser.add_argument("--env-file", default=None, help="Path to a .env file")
    parser.add_argument("--log-level", default=None, help="Logging level (default: INFO)")

    sub = parser.add_subparsers(dest="command", required=True)

    p = sub.add_parser("ingest", help="Fetch and ingest one or more URLs")
    p.add_argument("urls", nargs="+")

    p = sub.add_parser("ingest-text", help="Ingest a local text file under a URL")
    p.add_argument("url")
    p.add_argument("file")
    p.add_argument("--title", default="")

    p = sub.add_parser("search", help="Show the best matching chunks")
    p.add_argument("query")
    p.add_argument("--n-results", "-n", type=int, default=None)

    p = sub.add_parser("ask", help="Answer a question from the ingested content")
    p.add_argument("question")
    p.add_argument("--json", action="store_true", help="Print the full response as JSON")

    sub.add_parser("list", help="List ingested content")

    p = sub.add_parser("delete", help="Delete content and its chunks")
    p.add_argument("content_id")

    sub.add_parser("stats", help="Show store statistics")
    sub.add_parser("health", help="Check the store")

    p = sub.add_parser("history", help="Show recent questions")
    p.add_argument("--limit", type=int, default=None)

    p = sub.add_parser("clear", help="Delete everything")
    p.add_argument("--yes", action="store_true")

    p = sub.add_parser("serve", help="Run the HTTP API")
    p.add_argument("--host", default="127.0.0.1")
    p.add_argument("--port", type=int, default=8000)

    return parser


def main(argv: Optional[list[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    config = AppConfig.from_env(args.env_file)
    if args.data_dir:
        config.data_dir = args.data_dir
    setup_logging(args.log_level or config.log_level)

    if args.command == "serve":
        import uvicorn

        from .app import create_app

        uvicorn.run(create_app(config), host=args.host, port=args.port)
        return 0

    try:
        with ContentQAService.from_config(config) as service:
            return COMMANDS[args.command](service, args)
    except (ContentQAError, VectorStoreError, ValueError) as e:
        logger.error("%s failed: %s", args.command, e)
        return 1


if __name__ == "__main__":
    sys.exit(main())
