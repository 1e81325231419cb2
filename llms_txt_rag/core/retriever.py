"""Two-stage retrieval: pick files from llms.txt summaries, then fetch them."""

import logging
import pathlib
from typing import List, Optional, Tuple

from langchain_core.language_models import BaseChatModel

from ..config.llms import create_chat_model
from ..config.settings import Settings
from .assembler import ContextAssembler
from .github_client import GitHubClient, SourceProvider, decode_file_content
from .selector import CandidateSelector, build_corpus_context

logger = logging.getLogger(__name__)

SUMMARY_FILENAME = "llms.txt"


def is_summary_path(path: str, hosting_repository: str) -> bool:
    """True for ``<repository>/llms.txt`` paths not owned by the hosting repository."""
    parts = pathlib.PurePosixPath(path).parts
    if len(parts) != 2 or parts[-1] != SUMMARY_FILENAME:
        return False
    return not path.startswith(hosting_repository + "/")


class RagContextRetriever:
    """Retriever combining llms.txt summaries, candidate selection and file assembly."""

    def __init__(
        self,
        provider: SourceProvider,
        chat_model: BaseChatModel,
        organization: str,
        hosting_repository: str,
        language: str = "en",
    ):
        """Initialize the retriever.

        Args:
            provider: Source of file trees and file bodies
            chat_model: Model used for candidate selection
            organization: GitHub organization holding all repositories
            hosting_repository: Repository holding ``<repo>/llms.txt`` files
            language: Prompt language ('en' or 'ja')
        """
        self.provider = provider
        self.organization = organization
        self.hosting_repository = hosting_repository
        self.language = language
        self.selector = CandidateSelector(chat_model, language=language)
        self.assembler = ContextAssembler(provider, organization)

    async def load_summaries(self) -> List[Tuple[str, str]]:
        """Read every llms.txt of the hosting repository as (repository name, text)."""
        files = await self.provider.list_tree_recursive(self.organization, self.hosting_repository)
        summary_files = [f for f in files if is_summary_path(f.path, self.hosting_repository)]
        logger.info(f"Found {len(summary_files)} llms.txt files in {self.organization}/{self.hosting_repository}")

        summaries = []
        for entry in summary_files:
            repository_name = pathlib.PurePosixPath(entry.path).parts[0]
            content = await self.provider.get_file(self.organization, self.hosting_repository, entry.path)
            summaries.append((repository_name, decode_file_content(content)))
        return summaries

    async def build_corpus_context(self) -> str:
        return build_corpus_context(await self.load_summaries(), language=self.language)

    async def fetch_rag_context(self, user_query: str) -> str:
        """
        Build the RAG context for a user query.

        Args:
            user_query: Natural language request

        Returns:
            Fenced file contents of the selected candidates (possibly empty)
        """
        logger.info(f"Fetching RAG context for: '{user_query[:50]}'")

        corpus_context = await self.build_corpus_context()
        candidates = await self.selector.select(user_query, corpus_context)
        for candidate in candidates:
            logger.info(f"  - {candidate.repository_name}/{candidate.file_path}: {candidate.reason}")

        return await self.assembler.assemble(candidates)


async def fetch_rag_context(settings: Settings, user_query: str, chat_model: Optional[BaseChatModel] = None) -> str:
    """Run one retrieval with a fresh GitHub client built from settings.

    Raises:
        ConfigurationMissingError: if a required setting is unset
    """
    organization = settings.require("organization")
    hosting_repository = settings.require("llms_txt_repository")
    token = settings.require("github_token")
    if chat_model is None:
        chat_model = create_chat_model(settings)

    async with GitHubClient(token, api_url=settings.github_api_url) as github:
        retriever = RagContextRetriever(
            github,
            chat_model,
            organization=organization,
            hosting_repository=hosting_repository,
            language=settings.prompt_language,
        )
        return await retriever.fetch_rag_context(user_query)
