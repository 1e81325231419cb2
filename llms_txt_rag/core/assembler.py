"""Fetches candidate files and joins them into a RAG context."""

import asyncio
import logging
from typing import List, Sequence

from ..models.rag_models import CandidateFile
from .github_client import SourceProvider, decode_file_content

logger = logging.getLogger(__name__)


def format_block(candidate: CandidateFile, body: str) -> str:
    """Fence one file body under a ``repository/path`` header."""
    if body and not body.endswith("\n"):
        body += "\n"
    return f"```{candidate.repository_name}/{candidate.file_path}\n{body}```"


class ContextAssembler:
    """Builds the RAG context from selected candidate files."""

    def __init__(self, provider: SourceProvider, organization: str):
        self.provider = provider
        self.organization = organization

    async def _fetch_text(self, candidate: CandidateFile) -> str:
        try:
            content = await self.provider.get_file(self.organization, candidate.repository_name, candidate.file_path)
            return decode_file_content(content)
        except Exception as e:
            logger.error(f"Failed to fetch {candidate.repository_name}/{candidate.file_path}: {e}")
            return ""

    async def assemble(self, candidates: Sequence[CandidateFile]) -> str:
        """
        Fetch every candidate and concatenate the fenced blocks.

        A candidate whose fetch or decode fails keeps its block with an
        empty body. Block order equals candidate order.
        """
        if not candidates:
            return ""

        bodies: List[str] = await asyncio.gather(*(self._fetch_text(c) for c in candidates))
        blocks = [format_block(c, body) for c, body in zip(candidates, bodies)]
        return "\n\n".join(blocks).rstrip("\n")
