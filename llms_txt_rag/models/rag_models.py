"""
Pydantic models for repository files, summaries and retrieval candidates.
"""

from typing import Iterable, Literal, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field


class FileEntry(BaseModel):
    """One item of a GitHub contents listing."""
    model_config = ConfigDict(frozen=True, extra="ignore")

    name: str
    path: str
    type: Literal["file", "dir"]
    sha: Optional[str] = None
    size: Optional[int] = None
    url: Optional[str] = None
    html_url: Optional[str] = None
    download_url: Optional[str] = None

    @property
    def is_file(self) -> bool:
        return self.type == "file"


class FileContent(BaseModel):
    """Encoded body of a single file as returned by the contents API."""
    model_config = ConfigDict(extra="ignore")

    content: str = ""
    encoding: str = ""
    sha: Optional[str] = None


class RepositorySnapshot(BaseModel):
    """
    Files of a repository, directories already expanded.

    Order is the depth-first pre-order of the contents listing.
    """
    model_config = ConfigDict(frozen=True)

    repository_name: str
    files: Tuple[FileEntry, ...] = ()

    @classmethod
    def from_entries(cls, repository_name: str, entries: Iterable[FileEntry]) -> "RepositorySnapshot":
        files = tuple(entries)
        for entry in files:
            if not entry.is_file:
                raise ValueError(f"Snapshot cannot hold directory entry: {entry.path}")
        return cls(repository_name=repository_name, files=files)

    @property
    def paths(self) -> Tuple[str, ...]:
        return tuple(entry.path for entry in self.files)

    def __len__(self) -> int:
        return len(self.files)


class SummaryDocument(BaseModel):
    """Generated llms.txt text for one repository."""

    repository_name: str
    content: str

    @property
    def path(self) -> str:
        """Location of the document inside the hosting repository."""
        return f"{self.repository_name}/llms.txt"


class CandidateFile(BaseModel):
    """A file the selection step judged relevant to a user request."""
    model_config = ConfigDict(extra="ignore")

    reason: str = Field(
        description="Why this file is relevant/helpful for the request"
    )
    repository_name: str = Field(
        description="Repository containing the file"
    )
    file_path: str = Field(
        description="Path of the file inside the repository, including folders"
    )


class FetchRagContextInput(BaseModel):
    """Arguments of the fetch_github_rag_context tool."""

    userQuery: str = Field(description="User question or request")
