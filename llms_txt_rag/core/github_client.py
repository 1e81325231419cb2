"""GitHub REST API access for repository contents and llms.txt publishing."""

import base64
import binascii
import logging
from typing import Any, Dict, List, Optional, Protocol

import httpx
from pydantic import ValidationError

from ..exceptions import GitHubAPIError
from ..models.rag_models import FileContent, FileEntry

logger = logging.getLogger(__name__)


class SourceProvider(Protocol):
    """What the retrieval pipeline needs from a source-control host."""

    async def list_tree_recursive(self, organization: str, repository: str, path: str = "") -> List[FileEntry]:
        ...

    async def get_file(self, organization: str, repository: str, path: str) -> Optional[FileContent]:
        ...


def decode_file_content(content: Optional[FileContent]) -> str:
    """Decode a contents-API body to text.

    Returns an empty string when the body is missing or cannot be decoded.
    """
    if content is None:
        return ""
    encoding = (content.encoding or "").lower()
    try:
        if encoding == "base64":
            raw = base64.b64decode(content.content)
            return raw.decode("utf-8", errors="replace")
        if encoding in ("utf-8", "utf8", "text"):
            return content.content
    except (binascii.Error, ValueError) as e:
        logger.warning(f"Failed to decode file content: {e}")
        return ""
    logger.debug(f"Unsupported content encoding: {content.encoding!r}")
    return ""


class GitHubClient:
    """
    Async client for the parts of the GitHub REST API this system uses.

    Read calls log failures and degrade to empty results; write calls
    (branches, files, pull requests) raise GitHubAPIError.
    """

    def __init__(
        self,
        token: str,
        api_url: str = "https://api.github.com",
        timeout: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """Initialize the client.

        Args:
            token: GitHub access token
            api_url: Base URL of the REST API
            timeout: Per-request timeout in seconds
            transport: Optional httpx transport (used by tests)
        """
        self.api_url = api_url.rstrip("/")
        self._client = httpx.AsyncClient(
            base_url=self.api_url,
            headers={
                "Authorization": f"token {token}",
                "Accept": "application/vnd.github+json",
            },
            timeout=timeout,
            transport=transport,
        )

    async def __aenter__(self) -> "GitHubClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    # ----- read operations -------------------------------------------------

    async def list_directory(self, organization: str, repository: str, path: str = "") -> List[FileEntry]:
        """List one directory level. Returns an empty list on failure."""
        try:
            response = await self._client.get(f"/repos/{organization}/{repository}/contents/{path}")
            response.raise_for_status()
            data = response.json()
        except (httpx.HTTPError, ValueError) as e:
            logger.error(f"Failed to retrieve repository contents {organization}/{repository}/{path}: {e}")
            return []

        if not isinstance(data, list):
            return []

        entries = []
        for item in data:
            if item.get("type") not in ("file", "dir"):
                logger.debug(f"Skipping {item.get('type')} entry: {item.get('path')}")
                continue
            try:
                entries.append(FileEntry.model_validate(item))
            except ValidationError as e:
                logger.warning(f"Skipping malformed contents entry {item.get('path')}: {e}")
        return entries

    async def list_tree_recursive(self, organization: str, repository: str, path: str = "") -> List[FileEntry]:
        """
        List every file under ``path``, expanding directories.

        Order is depth-first pre-order: a directory's files appear where the
        directory appeared in its parent listing. A failing subtree
        contributes nothing.
        """
        files = []
        for entry in await self.list_directory(organization, repository, path):
            if entry.is_file:
                files.append(entry)
            else:
                files.extend(await self.list_tree_recursive(organization, repository, entry.path))
        return files

    async def get_file(self, organization: str, repository: str, path: str) -> Optional[FileContent]:
        """Fetch one file body. Returns None on failure or when path is a directory."""
        try:
            response = await self._client.get(f"/repos/{organization}/{repository}/contents/{path}")
            response.raise_for_status()
            data = response.json()
        except (httpx.HTTPError, ValueError) as e:
            logger.error(f"Failed to retrieve file content {organization}/{repository}/{path}: {e}")
            return None

        if not isinstance(data, dict):
            return None
        try:
            return FileContent.model_validate(data)
        except ValidationError as e:
            logger.error(f"Unexpected file content payload for {organization}/{repository}/{path}: {e}")
            return None

    async def list_organization_repositories(self, organization: str) -> List[Dict[str, Any]]:
        """List all repositories of an organization, following pagination."""
        repositories = []
        page = 1
        while True:
            try:
                response = await self._client.get(
                    f"/orgs/{organization}/repos",
                    params={"per_page": 100, "page": page},
                )
                response.raise_for_status()
                batch = response.json()
            except (httpx.HTTPError, ValueError) as e:
                logger.error(f"Failed to get the repository list for organization {organization}: {e}")
                break

            if not isinstance(batch, list) or not batch:
                break
            repositories.extend(batch)
            if len(batch) < 100:
                break
            page += 1
        return repositories

    # ----- write operations ------------------------------------------------

    async def _request(self, method: str, url: str, **kwargs) -> httpx.Response:
        try:
            response = await self._client.request(method, url, **kwargs)
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            logger.error(f"{method} {url} failed: {e.response.status_code} {e.response.text}")
            raise GitHubAPIError(f"{method} {url} failed: {e.response.status_code}",
                                 status_code=e.response.status_code) from e
        except httpx.HTTPError as e:
            logger.error(f"{method} {url} failed: {e}")
            raise GitHubAPIError(f"{method} {url} failed: {e}") from e
        return response

    async def get_latest_commit_sha(self, organization: str, repository: str, branch: str) -> str:
        response = await self._request("GET", f"/repos/{organization}/{repository}/git/ref/heads/{branch}")
        return response.json()["object"]["sha"]

    async def create_branch(self, organization: str, repository: str, new_branch: str, sha: str) -> None:
        await self._request(
            "POST",
            f"/repos/{organization}/{repository}/git/refs",
            json={"ref": f"refs/heads/{new_branch}", "sha": sha},
        )

    async def get_file_sha(self, organization: str, repository: str, path: str, branch: str) -> Optional[str]:
        """Blob SHA of an existing file on a branch, None if it does not exist."""
        try:
            response = await self._client.get(
                f"/repos/{organization}/{repository}/contents/{path}",
                params={"ref": branch},
            )
        except httpx.HTTPError as e:
            logger.warning(f"Failed to look up {path} on {branch}: {e}")
            return None
        if response.status_code != 200:
            return None
        data = response.json()
        return data.get("sha") if isinstance(data, dict) else None

    async def put_file(
        self,
        organization: str,
        repository: str,
        branch: str,
        path: str,
        content: str,
        message: str,
    ) -> None:
        """Create or overwrite a file on a branch."""
        payload = {
            "message": message,
            "content": base64.b64encode(content.encode("utf-8")).decode("ascii"),
            "branch": branch,
        }
        existing_sha = await self.get_file_sha(organization, repository, path, branch)
        if existing_sha:
            payload["sha"] = existing_sha
        await self._request("PUT", f"/repos/{organization}/{repository}/contents/{path}", json=payload)

    async def create_pull_request(
        self,
        organization: str,
        repository: str,
        title: str,
        body: str,
        head: str,
        base: str,
    ) -> Dict[str, Any]:
        response = await self._request(
            "POST",
            f"/repos/{organization}/{repository}/pulls",
            json={"title": title, "body": body, "head": head, "base": base},
        )
        return response.json()
