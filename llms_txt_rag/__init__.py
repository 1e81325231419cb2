"""
llms.txt RAG - repository summaries and retrieval for LLM clients
"""

__version__ = "0.1.0"

from .config.settings import Settings
from .core.retriever import RagContextRetriever, fetch_rag_context
from .core.summarizer import LlmsTxtSummarizer

__all__ = ["Settings", "RagContextRetriever", "fetch_rag_context", "LlmsTxtSummarizer"]
