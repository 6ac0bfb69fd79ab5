"""
github_client.py

Responsibility: Isolate all direct GitHub REST API interaction.

This module must be the only place that:
- Constructs GitHub REST endpoints
- Sends HTTP requests to api.github.com
- Interprets GitHub API responses / error payloads

Responses are returned as decoded JSON without further interpretation.
"""

from __future__ import annotations

import logging
from typing import Any
from urllib.parse import quote

import requests

from ghmanager import __version__

logger = logging.getLogger(__name__)

DEFAULT_API_BASE = "https://api.github.com"


class GitHubError(RuntimeError):
    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class GitHubClient:
    def __init__(self, token: str, api_base: str = DEFAULT_API_BASE, timeout: float = 30) -> None:
        if not token.strip():
            raise GitHubError("GitHub token is required.")
        self._token = token
        self._api_base = api_base.rstrip("/")
        self._timeout = timeout

    def _headers(self) -> dict[str, str]:
        return {
            "Accept": "application/vnd.github+json",
            "Authorization": f"Bearer {self._token}",
            "X-GitHub-Api-Version": "2022-11-28",
            "User-Agent": f"ghmanager/{__version__}",
        }

    def _request(
        self,
        method: str,
        path: str,
        *,
        json_body: dict[str, Any] | None = None,
        params: dict[str, Any] | None = None,
    ) -> Any:
        url = f"{self._api_base}{path}"
        logger.debug("%s %s", method, path)
        try:
            r = requests.request(
                method,
                url,
                headers=self._headers(),
                json=json_body,
                params=params,
                timeout=self._timeout,
            )
        except requests.RequestException as e:
            raise GitHubError(f"GitHub API request failed {method} {path}: {e}") from e
        if r.status_code >= 400:
            try:
                payload = r.json()
            except ValueError:
                payload = {"message": r.text}
            message = payload.get("message", payload) if isinstance(payload, dict) else payload
            raise GitHubError(
                f"GitHub API error {r.status_code} {method} {path}: {message}",
                status_code=r.status_code,
            )
        if r.status_code == 204:
            return None
        try:
            return r.json()
        except ValueError as e:
            raise GitHubError(
                f"GitHub API returned invalid JSON {r.status_code} {method} {path}",
                status_code=r.status_code,
            ) from e

    @staticmethod
    def _repo_path(owner: str, repo: str) -> str:
        return f"/repos/{quote(owner, safe='')}/{quote(repo, safe='')}"

    def get_authenticated_user(self) -> dict[str, Any]:
        return self._request("GET", "/user")

    def create_repo(self, **fields: Any) -> dict[str, Any]:
        """
        Create a repository owned by the authenticated user.

        `fields` is sent as the request body unchanged (name, description, private, ...).
        """
        return self._request("POST", "/user/repos", json_body=fields)

    def get_repo(self, owner: str, repo: str) -> dict[str, Any]:
        return self._request("GET", self._repo_path(owner, repo))

    def update_repo(self, owner: str, repo: str, **fields: Any) -> dict[str, Any]:
        return self._request("PATCH", self._repo_path(owner, repo), json_body=fields)

    def list_repos(self, **params: Any) -> list[dict[str, Any]]:
        """
        List repositories of the authenticated user (a single page).
        """
        return self._request("GET", "/user/repos", params=params)

    def replace_topics(self, owner: str, repo: str, names: list[str]) -> dict[str, Any]:
        return self._request(
            "PUT",
            f"{self._repo_path(owner, repo)}/topics",
            json_body={"names": list(names)},
        )

    def get_content(self, owner: str, repo: str, path: str, ref: str | None = None) -> Any:
        params = {"ref": ref} if ref else None
        return self._request(
            "GET",
            f"{self._repo_path(owner, repo)}/contents/{quote(path)}",
            params=params,
        )

    def put_content(
        self,
        owner: str,
        repo: str,
        path: str,
        *,
        message: str,
        content: str,
        branch: str,
        sha: str | None = None,
    ) -> dict[str, Any]:
        """
        Create or update a file. `content` must already be base64-encoded.

        Passing `sha` (the blob sha of the current file) turns the call into an update.
        """
        body: dict[str, Any] = {"message": message, "content": content, "branch": branch}
        if sha is not None:
            body["sha"] = sha
        return self._request(
            "PUT",
            f"{self._repo_path(owner, repo)}/contents/{quote(path)}",
            json_body=body,
        )

    def create_from_template(self, template_owner: str, template_repo: str, **fields: Any) -> dict[str, Any]:
        return self._request(
            "POST",
            f"{self._repo_path(template_owner, template_repo)}/generate",
            json_body=fields,
        )
