"""
manager.py

Responsibility: Repository workflows on top of `GitHubClient`.

Each workflow issues a small, fixed sequence of API calls against repositories
owned by the authenticated user and returns the raw API response. API errors
propagate unchanged as `GitHubError`.
"""

from __future__ import annotations

import base64
import logging
from datetime import date
from typing import Any

from ghmanager.github_client import GitHubClient, GitHubError
from ghmanager.licenses import fetch_license_text, fill_mit_placeholders
from ghmanager.renderer import render_template, render_template_dir

logger = logging.getLogger(__name__)

REPO_DEFAULTS: dict[str, Any] = {
    "private": False,
    "auto_init": True,
    "gitignore_template": None,
    "license_template": None,
    "has_issues": True,
    "has_projects": False,
    "has_wiki": False,
    "delete_branch_on_merge": True,
    "allow_squash_merge": True,
    "allow_merge_commit": False,
    "allow_rebase_merge": True,
}

# Settings copied by `clone_settings`, in addition to topics.
CLONED_SETTINGS = (
    "description",
    "homepage",
    "private",
    "has_issues",
    "has_projects",
    "has_wiki",
    "allow_squash_merge",
    "allow_merge_commit",
    "allow_rebase_merge",
    "delete_branch_on_merge",
)

# (template file, repository path, commit message), pushed in this order.
RUST_PROJECT_FILES = (
    ("Cargo.toml", "Cargo.toml", "Initial Cargo.toml"),
    ("main.rs", "src/main.rs", "Initial main.rs"),
    ("lib.rs", "src/lib.rs", "Initial lib.rs"),
    ("README.md", "README.md", "Update README"),
    ("gitignore", ".gitignore", "Add Rust .gitignore"),
)


class ManagerError(RuntimeError):
    pass


class GitHubManager:
    """Repository workflows for the authenticated GitHub user.

    Call `init()` once before any other method; it resolves and caches the
    login that owns every repository the manager touches.
    """

    def __init__(
        self,
        client: GitHubClient,
        *,
        author: str | None = None,
        branch: str = "main",
        repo_defaults: dict[str, Any] | None = None,
    ) -> None:
        self.client = client
        self.author = author
        self.branch = branch
        self.repo_defaults = {**REPO_DEFAULTS, **(repo_defaults or {})}
        self.username: str | None = None
        self.display_name: str | None = None

    def init(self) -> GitHubManager:
        data = self.client.get_authenticated_user()
        self.username = data["login"]
        self.display_name = data.get("name") or None
        logger.info("Authenticated as: %s", self.username)
        return self

    def _require_init(self) -> None:
        if self.username is None:
            raise ManagerError("Not authenticated: call init() first")

    @property
    def owner(self) -> str:
        self._require_init()
        return self.username

    def create_repo(self, name: str, description: str = "", **options: Any) -> dict[str, Any]:
        """Create a repository with sensible defaults; `options` override them."""
        fields = {**self.repo_defaults, "name": name, "description": description, **options}
        self._require_init()
        logger.info("Creating repository: %s", name)
        data = self.client.create_repo(**fields)
        logger.info("Created: %s", data.get("html_url"))
        return data

    def clone_settings(self, source_repo: str, target_repo: str) -> dict[str, Any]:
        """Copy settings and topics from one repository to another.

        Returns the source repository as fetched.
        """
        logger.info("Cloning settings from %s to %s", source_repo, target_repo)
        source = self.client.get_repo(self.owner, source_repo)

        settings = {key: source.get(key) for key in CLONED_SETTINGS}
        self.client.update_repo(self.owner, target_repo, **settings)
        logger.info("Settings cloned")

        topics = source.get("topics") or []
        if topics:
            self.client.replace_topics(self.owner, target_repo, topics)
            logger.info("Topics cloned: %s", ", ".join(topics))

        return source

    def resolve_author(self, author: str | None = None) -> str:
        return author or self.author or self.display_name or self.owner

    def setup_dual_license(self, repo: str, author: str | None = None, year: int | None = None) -> None:
        """
        Write a README plus official MIT and Apache-2.0 license texts (from SPDX).
        """
        self._require_init()
        holder = self.resolve_author(author)
        year = year or date.today().year

        logger.info("Setting up dual-license template: %s", repo)
        logger.info("Fetching official licenses from SPDX...")
        mit_template = fetch_license_text("MIT")
        apache_text = fetch_license_text("Apache-2.0")

        readme = render_template("dual-license", "README.md", {"repo_name": repo})
        self.create_file(repo, "README.md", "Update README with dual-license info", readme)

        mit_text = fill_mit_placeholders(mit_template, year, holder)
        self.create_file(repo, "LICENSE-MIT", "Add official MIT license from SPDX", mit_text)

        self.create_file(repo, "LICENSE-APACHE", "Add official Apache 2.0 license from SPDX", apache_text)

        logger.info("Dual-license template created with official SPDX licenses")

    def setup_rust_project(self, repo: str, project_name: str | None = None) -> None:
        """
        Push a minimal Cargo project (binary + library) to `repo`.
        """
        context = {
            "repo_name": repo,
            "project_name": project_name,
            "crate_name": project_name or repo.replace("-", "_"),
        }
        self._require_init()
        logger.info("Setting up Rust project: %s", repo)

        rendered = render_template_dir("rust", context)
        for template_file, path, message in RUST_PROJECT_FILES:
            self.create_file(repo, path, message, rendered[template_file])

        logger.info("Rust project structure created")

    def create_file(
        self,
        repo: str,
        path: str,
        message: str,
        content: str,
        branch: str | None = None,
    ) -> dict[str, Any]:
        """
        Create or update a file in a repository.

        An existing file is updated in place (its blob sha is passed along);
        a 404 on lookup means the file is created.
        """
        branch = branch or self.branch
        encoded = base64.b64encode(content.encode("utf-8")).decode("ascii")

        try:
            existing = self.client.get_content(self.owner, repo, path, ref=branch)
        except GitHubError as e:
            if e.status_code != 404:
                raise
            data = self.client.put_content(
                self.owner, repo, path, message=message, content=encoded, branch=branch
            )
            logger.info("Created: %s", path)
            return data

        data = self.client.put_content(
            self.owner,
            repo,
            path,
            message=message,
            content=encoded,
            branch=branch,
            sha=existing["sha"],
        )
        logger.info("Updated: %s", path)
        return data

    def get_repo(self, repo: str) -> dict[str, Any]:
        return self.client.get_repo(self.owner, repo)

    def list_repos(self, **options: Any) -> list[dict[str, Any]]:
        params = {"sort": "updated", "per_page": 100, **options}
        self._require_init()
        return self.client.list_repos(**params)

    def add_topics(self, repo: str, topics: list[str]) -> dict[str, Any]:
        """Set the repository topics (replaces any existing ones)."""
        data = self.client.replace_topics(self.owner, repo, topics)
        logger.info("Topics added: %s", ", ".join(topics))
        return data

    def create_from_template(
        self,
        template_repo: str,
        new_repo: str,
        description: str = "",
        private: bool = False,
    ) -> dict[str, Any]:
        logger.info("Creating %s from template %s", new_repo, template_repo)
        data = self.client.create_from_template(
            self.owner,
            template_repo,
            name=new_repo,
            description=description,
            private=private,
        )
        logger.info("Created from template: %s", data.get("html_url"))
        return data

    def make_template(self, repo: str) -> dict[str, Any]:
        data = self.client.update_repo(self.owner, repo, is_template=True)
        logger.info("%s is now a template repository", repo)
        return data
