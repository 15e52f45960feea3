"""
Command line interface: ask questions with RAG, write blog posts, inspect history, or serve the API.
"""

import argparse
import sys
from typing import List, Optional

from .agents.registry import ServiceRegistry
from .core.errors import RagWriterError

HELP_TEXT = """ragwriter - retrieval-augmented generation demo

Available commands:
  ask "your question"       Ask a question using RAG
  write-blog "topic"        Generate a blog post with a writer/editor loop
  history [--limit N]       Show stored question/answer pairs
  serve [--host H] [--port P]  Run the HTTP API
  help                      Show this help message

How ask works:
  1. Your question is converted to an embedding vector
  2. Similar previous Q&As are found by cosine similarity over the whole history
  3. These similar Q&As are given to the model as context
  4. The new answer is generated and stored for future questions

How write-blog works:
  A writer drafts the post, an editor answers PASS or NEEDS_IMPROVEMENT
  with feedback, and the writer revises the full draft. The loop stops on
  approval or after the iteration budget (BLOG_MAX_ITERATIONS, default 3).

Environment variables:
  LLM_PROVIDER=ollama|mock, EMBED_PROVIDER=ollama|sentence_transformers|hash,
  STORE_PROVIDER=sqlite|memory, DB_PATH, OLLAMA_HOST, OLLAMA_CHAT_MODEL,
  OLLAMA_EMBED_MODEL, RAG_TOP_K, DEBUG
"""


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="ragwriter",
        description="Retrieval-augmented Q&A and a self-critiquing blog writer",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s ask "What is retrieval-augmented generation?"
  %(prog)s write-blog "Vector search in three paragraphs"
  %(prog)s history --limit 5
        """
    )
    subparsers = parser.add_subparsers(dest="command")

    ask = subparsers.add_parser("ask", help="Ask a question using RAG")
    ask.add_argument("question", help="Your question")

    blog = subparsers.add_parser("write-blog", help="Generate a blog post using a writer/editor loop")
    blog.add_argument("topic", help="The topic for your blog post; quote topics with spaces")

    history = subparsers.add_parser("history", help="Show stored question/answer pairs")
    history.add_argument("--limit", type=int, default=10, help="Number of most recent entries to show")

    serve = subparsers.add_parser("serve", help="Run the HTTP API")
    serve.add_argument("--host", default="127.0.0.1")
    serve.add_argument("--port", type=int, default=8000)

    subparsers.add_parser("help", help="Show help information")
    return parser


def _ask(registry: ServiceRegistry, question: str) -> int:
    result = registry.rag_service.process_query(question)
    print(result.answer)
    if result.persistence_error:
        print(f"WARNING: Interaction was not saved: {result.persistence_error}", file=sys.stderr)
    return 0


def _write_blog(registry: ServiceRegistry, topic: str) -> int:
    result = registry.blog_writer.write(topic)
    print(result.draft)
    if not result.approved:
        print(f"NOTE: Editor did not approve the draft after {result.iterations} iterations", file=sys.stderr)
    return 0


def _history(registry: ServiceRegistry, limit: int) -> int:
    records = list(registry.store.scan_all())
    if not records:
        print("No interactions stored yet.")
        return 0
    for record in records[-limit:]:
        print(f"[{record.id}] Q: {record.prompt}")
        print(f"     A: {record.response}")
        print()
    return 0


def _serve(host: str, port: int) -> int:
    import uvicorn
    uvicorn.run("ragwriter.api.main:app", host=host, port=port)
    return 0


def main(argv: Optional[List[str]] = None, registry: Optional[ServiceRegistry] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command in (None, "help"):
        print(HELP_TEXT)
        return 0

    if args.command == "serve":
        return _serve(args.host, args.port)

    if args.command == "history" and args.limit < 1:
        parser.error("--limit must be >= 1")

    try:
        registry = registry or ServiceRegistry()

        if args.command == "ask":
            return _ask(registry, args.question)
        elif args.command == "write-blog":
            return _write_blog(registry, args.topic)
        else:
            return _history(registry, args.limit)

    except RagWriterError as e:
        print(f"ERROR: {e}", file=sys.stderr)
        return 1
    except ValueError as e:
        print(f"ERROR: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
