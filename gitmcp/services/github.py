"""GitHub REST client -- the provider behind every gateway command."""

from __future__ import annotations

import asyncio
import base64
import logging
from collections.abc import Mapping, Sequence
from typing import Any, Protocol, runtime_checkable
from urllib.parse import quote

import aiohttp

from ..state.session_store import Identity

logger = logging.getLogger(__name__)

_API_VERSION = "2022-11-28"
_FILE_MODE = "100644"


def _repo_path(owner: str, repo: str) -> str:
    return f"/repos/{quote(owner, safe='')}/{quote(repo, safe='')}"


class GitHubAPIError(Exception):
    """Non-2xx response from the GitHub API."""

    def __init__(self, status: int, message: str) -> None:
        self.status = status
        self.message = message
        super().__init__(f"{message} (HTTP {status})")


@runtime_checkable
class ProviderClient(Protocol):
    async def verify_token(self, token: str) -> Identity: ...

    async def create_repository(
        self, token: str, *, name: str, description: str | None = None, private: bool = False,
    ) -> dict[str, Any]: ...

    async def push_files(
        self, token: str, *, owner: str, repo: str, branch: str,
        files: Sequence[Mapping[str, str]], message: str,
    ) -> None: ...

    async def create_issue(
        self, token: str, *, owner: str, repo: str, title: str,
        body: str | None = None, labels: list[str] | None = None,
    ) -> dict[str, Any]: ...

    async def create_pull_request(
        self, token: str, *, owner: str, repo: str, title: str,
        head: str, base: str, body: str | None = None,
    ) -> dict[str, Any]: ...


class GitHubClient:
    """Thin async wrapper over the endpoints the gateway needs.

    One ``aiohttp.ClientSession`` is shared by all gateway sessions; the
    caller's token travels per request, so no per-user state is kept here.
    """

    def __init__(
        self,
        base_url: str = "https://api.github.com",
        timeout: float = 30.0,
        session: aiohttp.ClientSession | None = None,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._timeout = aiohttp.ClientTimeout(total=timeout)
        self._session = session
        self._owns_session = session is None

    async def _get_session(self) -> aiohttp.ClientSession:
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(timeout=self._timeout)
            self._owns_session = True
        return self._session

    async def close(self) -> None:
        if self._session is not None and self._owns_session and not self._session.closed:
            await self._session.close()
        self._session = None

    @staticmethod
    def _headers(token: str) -> dict[str, str]:
        return {
            "Authorization": f"Bearer {token}",
            "Accept": "application/vnd.github+json",
            "X-GitHub-Api-Version": _API_VERSION,
        }

    async def _request(
        self, method: str, path: str, token: str, payload: dict[str, Any] | None = None,
    ) -> Any:
        session = await self._get_session()
        async with session.request(
            method,
            f"{self._base_url}{path}",
            json=payload,
            headers=self._headers(token),
            timeout=self._timeout,
        ) as resp:
            if resp.status >= 400:
                raise GitHubAPIError(resp.status, await self._error_message(resp))
            if resp.status == 204:
                return None
            return await resp.json(content_type=None)

    @staticmethod
    async def _error_message(resp: aiohttp.ClientResponse) -> str:
        text = await resp.text()
        try:
            data = await resp.json(content_type=None)
        except ValueError:
            return text[:300] or resp.reason or "GitHub API error"
        if isinstance(data, dict) and data.get("message"):
            return str(data["message"])
        return text[:300] or resp.reason or "GitHub API error"

    # -- identity ----------------------------------------------------------

    async def verify_token(self, token: str) -> Identity:
        data = await self._request("GET", "/user", token)
        return Identity(
            login=data["login"],
            id=int(data["id"]),
            name=data.get("name"),
            token=token,
        )

    # -- repositories ------------------------------------------------------

    async def create_repository(
        self, token: str, *, name: str, description: str | None = None, private: bool = False,
    ) -> dict[str, Any]:
        payload: dict[str, Any] = {"name": name, "private": bool(private), "auto_init": True}
        if description is not None:
            payload["description"] = description
        try:
            data = await self._request("POST", "/user/repos", token, payload)
        except Exception as exc:
            logger.error("Repository creation failed: %s", exc)
            raise
        logger.info("Repository created: %s", data.get("full_name", name))
        return data

    async def push_files(
        self, token: str, *, owner: str, repo: str, branch: str,
        files: Sequence[Mapping[str, str]], message: str,
    ) -> None:
        """Commit *files* on top of *branch* using the git data API."""
        base = f"{_repo_path(owner, repo)}/git"
        ref_path = f"heads/{quote(branch, safe='/')}"
        try:
            ref = await self._request("GET", f"{base}/ref/{ref_path}", token)
            head_sha = ref["object"]["sha"]
            commit = await self._request("GET", f"{base}/commits/{head_sha}", token)
            tree_sha = commit["tree"]["sha"]

            blobs = await asyncio.gather(*(
                self._request("POST", f"{base}/blobs", token, {
                    "content": base64.b64encode(f["content"].encode("utf-8")).decode("ascii"),
                    "encoding": "base64",
                })
                for f in files
            ))
            tree = await self._request("POST", f"{base}/trees", token, {
                "base_tree": tree_sha,
                "tree": [
                    {"path": f["path"], "mode": _FILE_MODE, "type": "blob", "sha": blob["sha"]}
                    for f, blob in zip(files, blobs)
                ],
            })
            new_commit = await self._request("POST", f"{base}/commits", token, {
                "message": message,
                "tree": tree["sha"],
                "parents": [head_sha],
            })
            await self._request("PATCH", f"{base}/refs/{ref_path}", token, {
                "sha": new_commit["sha"],
            })
        except Exception as exc:
            logger.error("File push failed: %s", exc)
            raise
        logger.info("Files pushed to %s/%s:%s (%d files)", owner, repo, branch, len(files))

    # -- issues & pull requests -------------------------------------------

    async def create_issue(
        self, token: str, *, owner: str, repo: str, title: str,
        body: str | None = None, labels: list[str] | None = None,
    ) -> dict[str, Any]:
        payload: dict[str, Any] = {"title": title}
        if body is not None:
            payload["body"] = body
        if labels:
            payload["labels"] = list(labels)
        try:
            data = await self._request("POST", f"{_repo_path(owner, repo)}/issues", token, payload)
        except Exception as exc:
            logger.error("Issue creation failed: %s", exc)
            raise
        logger.info("Issue created: %s/%s#%s", owner, repo, data.get("number"))
        return data

    async def create_pull_request(
        self, token: str, *, owner: str, repo: str, title: str,
        head: str, base: str, body: str | None = None,
    ) -> dict[str, Any]:
        payload: dict[str, Any] = {"title": title, "head": head, "base": base}
        if body is not None:
            payload["body"] = body
        try:
            data = await self._request("POST", f"{_repo_path(owner, repo)}/pulls", token, payload)
        except Exception as exc:
            logger.error("Pull request creation failed: %s", exc)
            raise
        logger.info("Pull request created: %s/%s#%s", owner, repo, data.get("number"))
        return data
