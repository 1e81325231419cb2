"""Snapshot construction and filtering for remote repositories."""

import logging
import pathlib
from typing import Iterable, List, Optional

import pathspec

from ..models.rag_models import FileEntry, RepositorySnapshot
from .github_client import SourceProvider

logger = logging.getLogger(__name__)


class SnapshotFilter:
    """Decides which repository files are worth sending to the summarizer."""

    # Common directories to ignore
    DEFAULT_IGNORE_DIRS = {
        '.git', '.svn', '.hg', '.bzr',
        'node_modules', '__pycache__', '.pytest_cache',
        'target', 'build', 'dist', 'out',
        '.venv', 'venv', 'env',
        '.idea', '.vscode', '.settings',
        'coverage', '.coverage', '.nyc_output',
    }

    # Binary file extensions to ignore
    BINARY_EXTENSIONS = {
        '.exe', '.dll', '.so', '.dylib', '.a', '.lib', '.pyc', '.class', '.jar',
        '.jpg', '.jpeg', '.png', '.gif', '.bmp', '.ico', '.webp',
        '.pdf', '.doc', '.docx', '.xls', '.xlsx', '.ppt', '.pptx',
        '.zip', '.rar', '.7z', '.tar', '.gz', '.bz2',
        '.mp3', '.mp4', '.avi', '.mkv', '.mov',
        '.ttf', '.otf', '.woff', '.woff2', '.eot',
    }

    def __init__(self, max_file_size: int = 1024*1024, exclude_patterns: Optional[Iterable[str]] = None):
        """Initialize the filter.

        Args:
            max_file_size: Maximum file size in bytes to include
            exclude_patterns: Extra gitignore-style patterns to exclude
        """
        self.max_file_size = max_file_size
        patterns = list(exclude_patterns or [])
        self.exclude_spec = pathspec.GitIgnoreSpec.from_lines(patterns) if patterns else None

    def _in_ignored_directory(self, path: str) -> bool:
        return any(part in self.DEFAULT_IGNORE_DIRS for part in pathlib.PurePosixPath(path).parts[:-1])

    def _is_binary_file(self, path: str) -> bool:
        return pathlib.PurePosixPath(path).suffix.lower() in self.BINARY_EXTENSIONS

    def accepts(self, entry: FileEntry) -> bool:
        if not entry.is_file:
            return False
        if self._in_ignored_directory(entry.path) or self._is_binary_file(entry.path):
            return False
        if entry.size is not None and (entry.size > self.max_file_size or entry.size == 0):
            return False
        if self.exclude_spec and self.exclude_spec.match_file(entry.path):
            return False
        return True

    def apply(self, snapshot: RepositorySnapshot) -> RepositorySnapshot:
        kept = [entry for entry in snapshot.files if self.accepts(entry)]
        skipped = len(snapshot) - len(kept)
        if skipped:
            logger.info(f"Skipped {skipped} of {len(snapshot)} files in {snapshot.repository_name}")
        return RepositorySnapshot.from_entries(snapshot.repository_name, kept)


async def build_snapshot(provider: SourceProvider, organization: str, repository: str) -> RepositorySnapshot:
    """Walk a repository through the provider and return its file snapshot."""
    entries: List[FileEntry] = await provider.list_tree_recursive(organization, repository)
    snapshot = RepositorySnapshot.from_entries(repository, (e for e in entries if e.is_file))
    logger.info(f"Found {len(snapshot)} files in {organization}/{repository}")
    return snapshot
