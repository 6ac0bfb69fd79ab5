"""
cli.py

Responsibility: CLI entrypoint for ghmanager.

Flow for every sub-command:
1) Load configuration (YAML file, `.env`, environment)
2) Authenticate once (`GitHubManager.init`)
3) Dispatch to the matching `GitHubManager` workflow and print its result

This module should orchestrate behavior but keep concerns isolated:
- GitHub API: `github_client.py`
- Workflows: `manager.py`
- Configuration: `config.py`
"""

from __future__ import annotations

import argparse
import json
import logging
import os
import sys
from typing import Any

from dotenv import find_dotenv, load_dotenv

from ghmanager import __version__
from ghmanager.config import Config, ConfigError, load_config
from ghmanager.github_client import GitHubClient, GitHubError
from ghmanager.licenses import LicenseError
from ghmanager.manager import GitHubManager, ManagerError
from ghmanager.renderer import RenderError

logger = logging.getLogger(__name__)

TOKEN_HELP = (
    "Get a token from: https://github.com/settings/tokens\n"
    "Then: export GITHUB_TOKEN=ghp_your_token_here"
)


class CLIError(RuntimeError):
    pass


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(message)s" if not verbose else "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        stream=sys.stderr,
    )
    # Keep third-party request logging out of the normal output.
    logging.getLogger("urllib3").setLevel(logging.WARNING)


def _resolve_token(args: argparse.Namespace, config: Config) -> str:
    token = args.token or os.environ.get("GITHUB_TOKEN") or config.token or ""
    if not token:
        raise CLIError(f"GITHUB_TOKEN environment variable not set\n{TOKEN_HELP}")
    return token


def _build_manager(args: argparse.Namespace) -> GitHubManager:
    config = load_config(args.config)
    token = _resolve_token(args, config)
    client = GitHubClient(token, api_base=args.api_base or config.api_base)
    manager = GitHubManager(
        client,
        author=config.author,
        branch=config.branch,
        repo_defaults=config.repo_defaults,
    )
    return manager.init()


def create_repo_cmd(manager: GitHubManager, args: argparse.Namespace) -> int:
    options: dict[str, Any] = {}
    if args.private is not None:
        options["private"] = args.private
    manager.create_repo(args.name, args.description, **options)
    return 0


def clone_settings_cmd(manager: GitHubManager, args: argparse.Namespace) -> int:
    manager.clone_settings(args.source, args.target)
    return 0


def setup_dual_license_cmd(manager: GitHubManager, args: argparse.Namespace) -> int:
    manager.setup_dual_license(args.repo, args.author)
    return 0


def setup_rust_cmd(manager: GitHubManager, args: argparse.Namespace) -> int:
    manager.setup_rust_project(args.repo, args.project_name)
    return 0


def create_from_template_cmd(manager: GitHubManager, args: argparse.Namespace) -> int:
    manager.create_from_template(args.template, args.name, args.description, private=bool(args.private))
    return 0


def make_template_cmd(manager: GitHubManager, args: argparse.Namespace) -> int:
    manager.make_template(args.repo)
    return 0


def add_topics_cmd(manager: GitHubManager, args: argparse.Namespace) -> int:
    manager.add_topics(args.repo, args.topics)
    return 0


def list_cmd(manager: GitHubManager, args: argparse.Namespace) -> int:
    for repo in manager.list_repos():
        print(f"{repo['name'].ljust(30)} {repo.get('description') or ''}")
    return 0


def info_cmd(manager: GitHubManager, args: argparse.Namespace) -> int:
    print(json.dumps(manager.get_repo(args.repo), indent=2))
    return 0


def _build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="ghmanager",
        description="GitHub Repository Manager - repository workflows over the GitHub REST API",
        epilog=(
            "examples:\n"
            '  ghmanager create-repo my-rust-project "My new Rust project"\n'
            "  ghmanager setup-dual-license my-license-template\n"
            "  ghmanager setup-rust my-rust-project\n"
            "  ghmanager clone-settings rust_template my-new-project\n"
            "  ghmanager make-template rust_template\n"
            "  ghmanager create-from-template rust_template new-project\n"
            "  ghmanager add-topics my-project rust cli template"
        ),
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    p.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    p.add_argument("--token", default=None, help="GitHub token (or set env GITHUB_TOKEN)")
    p.add_argument("--config", default=None, help="Path to a YAML config file")
    p.add_argument("--api-base", default=None, help="GitHub API base URL")
    p.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    sub = p.add_subparsers(dest="command")

    c = sub.add_parser("create-repo", help="Create a new repository")
    c.add_argument("name")
    c.add_argument("description", nargs="?", default="")
    c.add_argument("--private", dest="private", action="store_true", default=None, help="Create a private repo")
    c.add_argument("--public", dest="private", action="store_false", default=None, help="Create a public repo")
    c.set_defaults(func=create_repo_cmd)

    c = sub.add_parser("clone-settings", help="Clone settings from one repo to another")
    c.add_argument("source")
    c.add_argument("target")
    c.set_defaults(func=clone_settings_cmd)

    c = sub.add_parser("setup-dual-license", help="Set up dual-license template (Apache-2.0 + MIT)")
    c.add_argument("repo")
    c.add_argument("author", nargs="?", default=None)
    c.set_defaults(func=setup_dual_license_cmd)

    c = sub.add_parser("setup-rust", help="Set up Rust project structure")
    c.add_argument("repo")
    c.add_argument("project_name", metavar="project-name", nargs="?", default=None)
    c.set_defaults(func=setup_rust_cmd)

    c = sub.add_parser("create-from-template", help="Create repo from template")
    c.add_argument("template")
    c.add_argument("name")
    c.add_argument("description", nargs="?", default="")
    c.add_argument("--private", action="store_true", help="Create a private repo")
    c.set_defaults(func=create_from_template_cmd)

    c = sub.add_parser("make-template", help="Make repo a template")
    c.add_argument("repo")
    c.set_defaults(func=make_template_cmd)

    c = sub.add_parser("add-topics", help="Add topics/tags")
    c.add_argument("repo")
    c.add_argument("topics", nargs="+")
    c.set_defaults(func=add_topics_cmd)

    c = sub.add_parser("list", help="List all repositories")
    c.set_defaults(func=list_cmd)

    c = sub.add_parser("info", help="Get repository info")
    c.add_argument("repo")
    c.set_defaults(func=info_cmd)

    return p


def main(argv: list[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)
    if args.command is None:
        parser.print_help()
        return 0

    _configure_logging(args.verbose)
    load_dotenv(find_dotenv(usecwd=True))

    try:
        manager = _build_manager(args)
        return int(args.func(manager, args))
    except GitHubError as e:
        print(f"Error: {e}", file=sys.stderr)
        if e.status_code is not None:
            print(f"HTTP Status: {e.status_code}", file=sys.stderr)
        return 1
    except (CLIError, ConfigError, LicenseError, ManagerError, RenderError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
