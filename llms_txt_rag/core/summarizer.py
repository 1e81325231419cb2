"""LLM-based llms.txt generation for whole repositories."""

import logging
from typing import Dict, Mapping

from langchain_core.language_models import BaseChatModel
from langchain_core.prompts import ChatPromptTemplate

from ..models.rag_models import RepositorySnapshot, SummaryDocument
from ..utils.llm_logger import invoke_prompt
from ..utils.prompts import get_prompts
from .github_client import SourceProvider, decode_file_content
from .output_parser import extract_output

logger = logging.getLogger(__name__)


class LlmsTxtSummarizer:
    """Produces one llms.txt summary document per repository."""

    def __init__(self, chat_model: BaseChatModel, provider: SourceProvider = None, language: str = "en"):
        """Initialize the summarizer.

        Args:
            chat_model: Chat model that writes the summary
            provider: Source provider used by synthesize_repository
            language: Prompt language ('en' or 'ja')
        """
        self.chat_model = chat_model
        self.provider = provider
        self.prompts = get_prompts(language)
        self.prompt = ChatPromptTemplate.from_messages([("human", self.prompts.llms_txt)])

    def format_file_contents(self, snapshot: RepositorySnapshot, contents: Mapping[str, str]) -> str:
        """Render every file of the snapshot, in order, for the prompt.

        Files missing from ``contents`` are rendered with an empty body.
        """
        p = self.prompts
        formatted = []
        for entry in snapshot.files:
            text = contents.get(entry.path, "")
            formatted.append(
                f"{p.file_name_label}: {entry.name}\n"
                f"{p.file_path_label}: {entry.path}\n"
                f"{p.file_content_label}:\n```\n{text}\n```\n"
            )
        return "\n".join(formatted)

    async def synthesize(
        self,
        repository_name: str,
        repository_url: str,
        snapshot: RepositorySnapshot,
        contents: Mapping[str, str],
    ) -> SummaryDocument:
        """Generate the llms.txt document for one repository.

        Args:
            repository_name: Repository name
            repository_url: Repository web URL
            snapshot: Files of the repository
            contents: Decoded text per file path

        Returns:
            SummaryDocument; its content is the raw model response when the
            model did not use the <output> wrapper.
        """
        logger.info(f"Generating llms.txt for {repository_name} ({len(snapshot)} files)")

        response = await invoke_prompt(
            self.prompt,
            self.chat_model,
            {
                "repository_name": repository_name,
                "repository_url": repository_url,
                "file_contents": self.format_file_contents(snapshot, contents),
            },
            agent_name="LlmsTxtSummarizer",
        )

        document = extract_output(response)
        if document is None:
            logger.warning(f"No <output> block in llms.txt response for {repository_name}; keeping raw response")
            document = response

        return SummaryDocument(repository_name=repository_name, content=document)

    async def fetch_contents(self, organization: str, snapshot: RepositorySnapshot) -> Dict[str, str]:
        """Fetch and decode every file of the snapshot, one after another."""
        if self.provider is None:
            raise ValueError("LlmsTxtSummarizer needs a provider to fetch file contents")

        contents = {}
        for entry in snapshot.files:
            body = await self.provider.get_file(organization, snapshot.repository_name, entry.path)
            contents[entry.path] = decode_file_content(body)
        return contents

    async def synthesize_repository(
        self,
        organization: str,
        repository_url: str,
        snapshot: RepositorySnapshot,
    ) -> SummaryDocument:
        """Fetch file contents through the provider, then synthesize."""
        contents = await self.fetch_contents(organization, snapshot)
        return await self.synthesize(snapshot.repository_name, repository_url, snapshot, contents)
