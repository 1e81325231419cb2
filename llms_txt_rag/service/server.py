"""
MCP server exposing the fetch_github_rag_context tool over SSE.

Each SSE connection gets its own transport, registered in a SessionRegistry
under a server-generated id. Clients post JSON-RPC messages to
``/messages/<session_id>/``.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime
from functools import partial
from typing import Any, Awaitable, Callable, Dict, Iterator, List, Optional
from uuid import uuid4

import mcp.types as types
import uvicorn
from mcp.server.lowlevel import Server
from mcp.server.sse import SseServerTransport
from starlette.applications import Starlette
from starlette.requests import Request
from starlette.responses import PlainTextResponse, Response
from starlette.routing import Route
from starlette.types import Receive, Scope, Send

from ..config.settings import Settings
from ..core.retriever import fetch_rag_context
from ..models.rag_models import FetchRagContextInput
from ..utils.prompts import get_prompts

logger = logging.getLogger(__name__)

SERVER_NAME = "llms-txt-rag-context-server"
SERVER_VERSION = "0.0.1"
TOOL_NAME = "fetch_github_rag_context"


@dataclass
class ToolSession:
    """A live client connection and its transport."""
    session_id: str
    transport: Any
    created_at: datetime = field(default_factory=datetime.now)


class SessionRegistry:
    """Maps session ids to live transports.

    Only mutated from the event loop: on connect and on disconnect of the
    session's own stream.
    """

    def __init__(self):
        self._sessions: Dict[str, ToolSession] = {}

    def connect(self, transport_factory: Callable[[str], Any]) -> ToolSession:
        """Register a new session; the factory receives the generated id."""
        session_id = uuid4().hex
        session = ToolSession(session_id=session_id, transport=transport_factory(session_id))
        self._sessions[session_id] = session
        logger.info(f"Session {session_id} connected ({len(self._sessions)} active)")
        return session

    def disconnect(self, session_id: str) -> None:
        if self._sessions.pop(session_id, None) is not None:
            logger.info(f"Session {session_id} disconnected ({len(self._sessions)} active)")

    def get(self, session_id: str) -> Optional[ToolSession]:
        return self._sessions.get(session_id)

    def __contains__(self, session_id: str) -> bool:
        return session_id in self._sessions

    def __iter__(self) -> Iterator[str]:
        return iter(list(self._sessions))

    def __len__(self) -> int:
        return len(self._sessions)


class MessageEndpoint:
    """ASGI endpoint that hands a posted message to its session's transport."""

    def __init__(self, registry: SessionRegistry):
        self.registry = registry

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        session_id = scope.get("path_params", {}).get("session_id", "")
        session = self.registry.get(session_id)
        if session is None:
            logger.warning(f"Message for unknown session {session_id!r}")
            response = PlainTextResponse("No transport found for sessionId", status_code=400)
            await response(scope, receive, send)
            return
        await session.transport.handle_post_message(scope, receive, send)


class RetrievalService:
    """MCP server wrapping the two-stage retrieval pipeline."""

    def __init__(
        self,
        settings: Settings,
        fetch: Optional[Callable[[str], Awaitable[str]]] = None,
        registry: Optional[SessionRegistry] = None,
    ):
        """Initialize the service.

        Args:
            settings: Runtime settings
            fetch: Coroutine function user_query -> RAG context; defaults to
                a GitHub-backed retrieval built from settings on every call
            registry: Session registry shared with the HTTP routes
        """
        self.settings = settings
        self.prompts = get_prompts(settings.prompt_language)
        self.fetch = fetch or partial(fetch_rag_context, settings)
        self.registry = registry if registry is not None else SessionRegistry()

        self.server = Server(SERVER_NAME, version=SERVER_VERSION)
        self.server.list_tools()(self.list_tools)
        self.server.call_tool(validate_input=False)(self.call_tool)

    def tool_definition(self) -> types.Tool:
        schema = FetchRagContextInput.model_json_schema()
        schema["properties"]["userQuery"]["description"] = self.prompts.query_description
        return types.Tool(
            name=TOOL_NAME,
            description=self.prompts.tool_description,
            inputSchema=schema,
        )

    async def list_tools(self) -> List[types.Tool]:
        return [self.tool_definition()]

    async def call_tool(self, name: str, arguments: Optional[Dict[str, Any]]) -> List[types.TextContent]:
        """Run a tool; every failure is returned as error text, never raised."""
        try:
            if name != TOOL_NAME:
                raise LookupError(self.prompts.unknown_tool.format(name=name))
            params = FetchRagContextInput.model_validate(arguments or {})
            text = await self.fetch(params.userQuery)
        except Exception as e:
            logger.error(f"Tool call {name!r} failed: {e}")
            text = f"{self.prompts.error_prefix}{e}"
        return [types.TextContent(type="text", text=text)]

    async def handle_sse(self, request: Request) -> Response:
        session = self.registry.connect(lambda session_id: SseServerTransport(f"/messages/{session_id}/"))
        try:
            async with session.transport.connect_sse(request.scope, request.receive, request._send) as streams:
                read_stream, write_stream = streams
                await self.server.run(read_stream, write_stream, self.server.create_initialization_options())
        finally:
            self.registry.disconnect(session.session_id)
        return Response()

    def create_app(self) -> Starlette:
        return Starlette(
            routes=[
                Route("/sse", endpoint=self.handle_sse, methods=["GET"]),
                Route("/messages/{session_id}/", endpoint=MessageEndpoint(self.registry), methods=["POST"]),
            ]
        )


def run_server(settings: Settings, host: Optional[str] = None, port: Optional[int] = None) -> None:
    """Serve the MCP endpoint with uvicorn until interrupted."""
    service = RetrievalService(settings)
    host = host or settings.server_host
    port = port or settings.server_port
    logger.info(f"Starting {SERVER_NAME} on {host}:{port}")
    uvicorn.run(service.create_app(), host=host, port=port)
