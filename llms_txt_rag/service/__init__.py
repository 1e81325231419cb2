"""MCP server and client for the RAG context tool."""

from .server import RetrievalService, SessionRegistry, ToolSession, TOOL_NAME, run_server
from .client import AnswerGenerator, RetrievalClient

__all__ = [
    "AnswerGenerator",
    "RetrievalClient",
    "RetrievalService",
    "SessionRegistry",
    "ToolSession",
    "TOOL_NAME",
    "run_server",
]
