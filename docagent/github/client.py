"""Async GitHub REST client scoped to one installation token."""

from __future__ import annotations

import base64
from typing import Any, Dict, Mapping, Optional
from urllib.parse import quote

import httpx

from ..models import TreeEntry, TreeListing

DEFAULT_API_URL = "https://api.github.com"
API_VERSION = "2022-11-28"
RAW_MEDIA_TYPE = "application/vnd.github.raw"


class GitHubAPIError(RuntimeError):
    """Raised for any non-success response from the GitHub API."""

    def __init__(self, status: int, message: str, *, url: str | None = None) -> None:
        detail = f" for {url}" if url else ""
        super().__init__(f"GitHub API error {status}{detail}: {message}")
        self.status = status
        self.message = message
        self.url = url


def default_headers(token: str | None = None) -> Dict[str, str]:
    headers = {
        "Accept": "application/vnd.github+json",
        "X-GitHub-Api-Version": API_VERSION,
    }
    if token:
        headers["Authorization"] = f"Bearer {token}"
    return headers


def raise_for_status(response: httpx.Response) -> None:
    if response.is_success:
        return
    message = response.text
    try:
        data = response.json()
    except ValueError:
        data = None
    if isinstance(data, dict) and isinstance(data.get("message"), str):
        message = data["message"]
    raise GitHubAPIError(response.status_code, message or response.reason_phrase, url=str(response.request.url))


class GitHubClient:
    """Thin wrapper over the repository endpoints used by a documentation run."""

    def __init__(
        self,
        token: str | None,
        *,
        base_url: str = DEFAULT_API_URL,
        transport: httpx.AsyncBaseTransport | None = None,
        timeout: float = 30.0,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self._client = httpx.AsyncClient(
            base_url=self.base_url,
            headers=default_headers(token),
            transport=transport,
            timeout=timeout,
        )

    async def __aenter__(self) -> "GitHubClient":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    async def get_default_branch(self, owner: str, repo: str) -> str:
        data = await self._get_json(f"/repos/{owner}/{repo}")
        return str(data["default_branch"])

    async def get_tree_sha(self, owner: str, repo: str, branch: str) -> str:
        data = await self._get_json(f"/repos/{owner}/{repo}/branches/{quote(branch, safe='')}")
        return str(data["commit"]["commit"]["tree"]["sha"])

    async def list_repository_files(self, owner: str, repo: str, branch: str) -> TreeListing:
        """List every blob on ``branch`` using a recursive tree request."""
        tree_sha = await self.get_tree_sha(owner, repo, branch)
        data = await self._get_json(
            f"/repos/{owner}/{repo}/git/trees/{tree_sha}", params={"recursive": "1"}
        )
        files = [
            TreeEntry(path=item["path"], sha=item.get("sha"), size=item.get("size"))
            for item in data.get("tree", [])
            if item.get("type") == "blob" and item.get("path")
        ]
        return TreeListing(files=files, truncated=bool(data.get("truncated")))

    async def get_file_content(self, owner: str, repo: str, path: str, ref: str) -> str:
        """Return the raw text of ``path`` at ``ref``."""
        response = await self._client.get(
            self._contents_url(owner, repo, path),
            params={"ref": ref},
            headers={"Accept": RAW_MEDIA_TYPE},
        )
        raise_for_status(response)
        return response.text

    async def get_file_sha(self, owner: str, repo: str, path: str, ref: str) -> Optional[str]:
        """Return the blob SHA of ``path`` at ``ref``, or None when it does not exist."""
        try:
            data = await self._get_json(self._contents_url(owner, repo, path), params={"ref": ref})
        except GitHubAPIError as exc:
            if exc.status == 404:
                return None
            raise
        if isinstance(data, dict) and isinstance(data.get("sha"), str):
            return data["sha"]
        return None

    async def put_file(
        self,
        owner: str,
        repo: str,
        path: str,
        *,
        message: str,
        content: str,
        branch: str,
        sha: str | None = None,
        author: Mapping[str, str] | None = None,
        committer: Mapping[str, str] | None = None,
    ) -> Dict[str, Any]:
        """Create or update ``path``; passing ``sha`` turns the write into an update."""
        payload: Dict[str, Any] = {
            "message": message,
            "content": base64.b64encode(content.encode("utf-8")).decode("ascii"),
            "branch": branch,
        }
        if sha:
            payload["sha"] = sha
        if author:
            payload["author"] = dict(author)
        if committer:
            payload["committer"] = dict(committer)
        response = await self._client.put(self._contents_url(owner, repo, path), json=payload)
        raise_for_status(response)
        return response.json()

    # ------------------------------------------------------------------
    # Helpers

    @staticmethod
    def _contents_url(owner: str, repo: str, path: str) -> str:
        return f"/repos/{owner}/{repo}/contents/{quote(path, safe='/')}"

    async def _get_json(self, url: str, *, params: Mapping[str, str] | None = None) -> Any:
        response = await self._client.get(url, params=params)
        raise_for_status(response)
        return response.json()
