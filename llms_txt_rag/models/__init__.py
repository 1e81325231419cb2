"""Data models for the llms.txt RAG system."""

from .rag_models import (
    CandidateFile,
    FetchRagContextInput,
    FileContent,
    FileEntry,
    RepositorySnapshot,
    SummaryDocument,
)

__all__ = [
    "CandidateFile",
    "FetchRagContextInput",
    "FileContent",
    "FileEntry",
    "RepositorySnapshot",
    "SummaryDocument",
]
