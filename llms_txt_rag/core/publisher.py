"""Generates llms.txt for every organization repository and opens a pull request."""

import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Callable, List, Optional, Sequence

from langchain_core.language_models import BaseChatModel

from ..config.llms import create_chat_model
from ..config.settings import Settings
from ..models.rag_models import SummaryDocument
from .github_client import GitHubClient
from .repository_parser import SnapshotFilter, build_snapshot
from .summarizer import LlmsTxtSummarizer

logger = logging.getLogger(__name__)

COMMIT_MESSAGE = "Update llms.txt"
PR_TITLE = "Update llms.txt"


@dataclass
class PublishResult:
    """Outcome of one generation run."""
    documents: List[SummaryDocument] = field(default_factory=list)
    branch: Optional[str] = None
    pull_request_url: Optional[str] = None
    dry_run: bool = False


class LlmsTxtPublisher:
    """Runs summary generation across an organization and publishes the result."""

    def __init__(
        self,
        github: GitHubClient,
        summarizer: LlmsTxtSummarizer,
        organization: str,
        hosting_repository: str,
        base_branch: str = "main",
        snapshot_filter: Optional[SnapshotFilter] = None,
        clock: Callable[[], datetime] = datetime.now,
    ):
        self.github = github
        self.summarizer = summarizer
        self.organization = organization
        self.hosting_repository = hosting_repository
        self.base_branch = base_branch
        self.snapshot_filter = snapshot_filter or SnapshotFilter()
        self.clock = clock

    def branch_name(self) -> str:
        return f"llms-txt-{self.clock():%Y%m%d-%H%M%S}"

    async def generate_summaries(self, only: Optional[Sequence[str]] = None) -> List[SummaryDocument]:
        """Synthesize llms.txt for each repository of the organization.

        Args:
            only: Restrict the run to these repository names

        Returns:
            One SummaryDocument per processed repository
        """
        repositories = await self.github.list_organization_repositories(self.organization)
        logger.info(f"Found {len(repositories)} repositories in organization {self.organization}")

        documents = []
        for repo in repositories:
            name = repo["name"]
            if name == self.hosting_repository:
                logger.info(f"Skipping hosting repository {name}")
                continue
            if only and name not in only:
                continue

            snapshot = self.snapshot_filter.apply(await build_snapshot(self.github, self.organization, name))
            document = await self.summarizer.synthesize_repository(
                self.organization, repo.get("html_url", ""), snapshot
            )
            documents.append(document)
        return documents

    async def publish(self, documents: Sequence[SummaryDocument]) -> PublishResult:
        """Commit documents to a new branch of the hosting repository and open a PR."""
        if not documents:
            logger.info("No llms.txt documents to publish")
            return PublishResult()

        base_sha = await self.github.get_latest_commit_sha(self.organization, self.hosting_repository, self.base_branch)
        branch = self.branch_name()
        await self.github.create_branch(self.organization, self.hosting_repository, branch, base_sha)
        logger.info(f"Created branch {branch} from {self.base_branch}@{base_sha[:7]}")

        for document in documents:
            await self.github.put_file(
                self.organization,
                self.hosting_repository,
                branch,
                document.path,
                document.content,
                COMMIT_MESSAGE,
            )
            logger.info(f"Wrote {document.path}")

        body = "Regenerated llms.txt for:\n" + "\n".join(f"- {d.repository_name}" for d in documents)
        pull_request = await self.github.create_pull_request(
            self.organization, self.hosting_repository, PR_TITLE, body, branch, self.base_branch
        )
        url = pull_request.get("html_url")
        logger.info(f"Pull request created: {url}")
        return PublishResult(documents=list(documents), branch=branch, pull_request_url=url)

    async def run(self, only: Optional[Sequence[str]] = None, dry_run: bool = False) -> PublishResult:
        documents = await self.generate_summaries(only)
        if dry_run:
            return PublishResult(documents=documents, dry_run=True)
        return await self.publish(documents)


async def run_generation(
    settings: Settings,
    only: Optional[Sequence[str]] = None,
    dry_run: bool = False,
    chat_model: Optional[BaseChatModel] = None,
) -> PublishResult:
    """Run a full generation with a GitHub client built from settings."""
    organization = settings.require("organization")
    hosting_repository = settings.require("llms_txt_repository")
    token = settings.require("github_token")
    if chat_model is None:
        chat_model = create_chat_model(settings)

    async with GitHubClient(token, api_url=settings.github_api_url) as github:
        publisher = LlmsTxtPublisher(
            github,
            LlmsTxtSummarizer(chat_model, provider=github, language=settings.prompt_language),
            organization=organization,
            hosting_repository=hosting_repository,
            base_branch=settings.base_branch,
            snapshot_filter=SnapshotFilter(settings.max_file_size, settings.exclude_patterns),
        )
        return await publisher.run(only=only, dry_run=dry_run)
