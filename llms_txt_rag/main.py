"""CLI interface for the llms.txt RAG system."""

import argparse
import asyncio
import logging
import sys
from typing import List, Optional

from .config.llms import create_chat_model
from .config.settings import Settings
from .core.publisher import run_generation
from .exceptions import LlmsTxtRagError
from .service.client import AnswerGenerator, RetrievalClient
from .service.server import run_server

logger = logging.getLogger(__name__)


def setup_logging(level: str = "INFO") -> None:
    """
    Set up logging with a separate log file for LLM calls.

    Args:
        level: Logging level (DEBUG, INFO, WARNING, ERROR)
    """
    log_level = getattr(logging, level.upper(), logging.INFO)

    # Clear any existing handlers to avoid conflicts
    logging.getLogger().handlers.clear()

    formatter = logging.Formatter('%(asctime)s - %(name)s - %(levelname)s - %(message)s')

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(formatter)

    file_handler = logging.FileHandler('llms_txt_rag.log', encoding='utf-8')
    file_handler.setFormatter(formatter)

    llm_handler = logging.FileHandler('llm_api.log', encoding='utf-8')
    llm_handler.setFormatter(formatter)

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)
    root_logger.addHandler(console_handler)
    root_logger.addHandler(file_handler)

    # LLM calls also go to llm_api.log
    llm_api_logger = logging.getLogger('llm_api')
    llm_api_logger.addHandler(llm_handler)
    llm_api_logger.setLevel(log_level)

    # httpx logs every request at INFO
    logging.getLogger('httpx').setLevel(logging.WARNING)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description='llms.txt generation and RAG context server')
    parser.add_argument('--log-level', default='INFO',
                        help='Logging level (default: INFO)')
    subparsers = parser.add_subparsers(dest='command', required=True)

    generate = subparsers.add_parser('generate', help='Generate llms.txt for organization repositories and open a PR')
    generate.add_argument('--repository', action='append', dest='repositories', metavar='NAME',
                          help='Only process this repository (repeatable)')
    generate.add_argument('--dry-run', action='store_true',
                          help='Print generated documents without creating a branch or PR')

    serve = subparsers.add_parser('serve', help='Run the MCP RAG context server')
    serve.add_argument('--host', type=str, help='Bind address (default: MCP_SERVER_HOST or 0.0.0.0)')
    serve.add_argument('--port', type=int, help='Port (default: MCP_SERVER_PORT or 3001)')

    ask = subparsers.add_parser('ask', help='Ask a question through the MCP server')
    ask.add_argument('query', help='Natural language request')
    ask.add_argument('--server-url', type=str, help='SSE endpoint (default: MCP_SERVER_URL)')

    return parser


def cmd_generate(settings: Settings, args: argparse.Namespace) -> int:
    result = asyncio.run(run_generation(settings, only=args.repositories, dry_run=args.dry_run))

    if not result.documents:
        print("❌ No llms.txt documents were generated")
        return 1

    for document in result.documents:
        print(f"\n📄 {document.path}")
        print("-" * 50)
        print(document.content)
        print("-" * 50)

    if result.dry_run:
        print(f"\n🔍 Dry run: {len(result.documents)} documents generated, nothing published")
    else:
        print(f"\n✅ Published {len(result.documents)} documents on branch {result.branch}")
        print(f"🔗 Pull request: {result.pull_request_url}")
    return 0


def cmd_ask(settings: Settings, args: argparse.Namespace) -> int:
    client = RetrievalClient(
        server_url=args.server_url or settings.server_url,
        answerer=AnswerGenerator(create_chat_model(settings), language=settings.prompt_language),
        timeout_seconds=settings.tool_timeout_seconds,
    )
    asyncio.run(client.ask(args.query))
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    """Main CLI interface."""
    args = build_parser().parse_args(argv)
    setup_logging(args.log_level)

    try:
        settings = Settings.from_env()
        if args.command == 'generate':
            return cmd_generate(settings, args)
        if args.command == 'serve':
            run_server(settings, host=args.host, port=args.port)
            return 0
        if args.command == 'ask':
            return cmd_ask(settings, args)
    except LlmsTxtRagError as e:
        logger.error(str(e))
        print(f"❌ Error: {e}")
        return 1
    except Exception as e:
        logger.exception("Fatal error during execution")
        print(f"❌ Error: {e}")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
