"""Core retrieval and summarization modules."""

from .assembler import ContextAssembler
from .github_client import GitHubClient, SourceProvider, decode_file_content
from .output_parser import extract_output
from .publisher import LlmsTxtPublisher, PublishResult
from .repository_parser import SnapshotFilter, build_snapshot
from .retriever import RagContextRetriever, fetch_rag_context
from .selector import CandidateSelector, build_corpus_context
from .summarizer import LlmsTxtSummarizer

__all__ = [
    "CandidateSelector",
    "ContextAssembler",
    "GitHubClient",
    "LlmsTxtPublisher",
    "LlmsTxtSummarizer",
    "PublishResult",
    "RagContextRetriever",
    "SnapshotFilter",
    "SourceProvider",
    "build_corpus_context",
    "build_snapshot",
    "decode_file_content",
    "extract_output",
    "fetch_rag_context",
]
