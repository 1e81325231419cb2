"""MCP client that fetches RAG context and answers the user's request."""

import json
import logging
from contextlib import asynccontextmanager
from datetime import timedelta
from typing import AsyncIterator, List

import mcp.types as types
from langchain_core.language_models import BaseChatModel
from langchain_core.prompts import ChatPromptTemplate
from mcp import ClientSession
from mcp.client.sse import sse_client

from ..utils.llm_logger import invoke_prompt
from ..utils.prompts import get_prompts
from .server import TOOL_NAME

logger = logging.getLogger(__name__)

CLIENT_NAME = "llms-txt-rag-client"


class AnswerGenerator:
    """Answers a request from the retrieved reference files."""

    def __init__(self, chat_model: BaseChatModel, language: str = "en"):
        self.chat_model = chat_model
        self.prompt = ChatPromptTemplate.from_messages([("human", get_prompts(language).answer)])

    async def answer(self, user_request: str, context: str) -> str:
        return await invoke_prompt(
            self.prompt,
            self.chat_model,
            {"context": context, "user_request": user_request},
            agent_name="AnswerGenerator",
        )


def first_text(result: types.CallToolResult) -> str:
    """Text of the first content item of a tool result, or an empty string."""
    for item in result.content[:1]:
        if isinstance(item, types.TextContent):
            return item.text
    return ""


def print_tools(tools: List[types.Tool]) -> None:
    for tool in tools:
        print(f"Name: {tool.name}")
        print(f"Description: {tool.description}")
        print(f"InputSchema: {json.dumps(tool.inputSchema, ensure_ascii=False)}")
    print("")
    print("-" * 32)
    print("")


class RetrievalClient:
    """Client for the llms.txt RAG context server."""

    def __init__(self, server_url: str, answerer: AnswerGenerator, timeout_seconds: float = 300.0):
        """Initialize the client.

        Args:
            server_url: SSE endpoint of the server (e.g. http://localhost:3001/sse)
            answerer: Final answer generator
            timeout_seconds: Upper bound for one tool call
        """
        self.server_url = server_url
        self.answerer = answerer
        self.timeout_seconds = timeout_seconds

    @asynccontextmanager
    async def connect(self) -> AsyncIterator[ClientSession]:
        """Open an initialized session; the transport is closed on exit."""
        async with sse_client(self.server_url, sse_read_timeout=self.timeout_seconds) as (read_stream, write_stream):
            async with ClientSession(read_stream, write_stream) as session:
                await session.initialize()
                logger.info(f"Connected to {self.server_url}")
                yield session

    async def fetch_context(self, session: ClientSession, user_query: str) -> str:
        result = await session.call_tool(
            TOOL_NAME,
            {"userQuery": user_query},
            read_timeout_seconds=timedelta(seconds=self.timeout_seconds),
        )
        return first_text(result)

    async def ask(self, user_query: str) -> str:
        """Retrieve context for the query from the server and answer it."""
        print("-" * 32)
        print("MCP Client Start")
        print("-" * 32)

        async with self.connect() as session:
            tools = await session.list_tools()
            print_tools(tools.tools)

            print(f"User Query: {user_query}")
            context = await self.fetch_context(session, user_query)
            print(f"Context: {context}")
            print("-" * 32)

        answer = await self.answerer.answer(user_query, context)
        print(f"Answer: {answer}")
        print("-" * 32)
        return answer
