"""Tests for the ghmanager CLI."""

import json
from unittest.mock import MagicMock, patch

import pytest
import requests

from ghmanager import cli
from ghmanager.github_client import GitHubError


@pytest.fixture(autouse=True)
def isolated_env(tmp_path, monkeypatch):
    """Keep the user's config, .env and token out of the tests."""
    monkeypatch.setenv("HOME", str(tmp_path))
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv("GHMANAGER_CONFIG", raising=False)
    # Set before deleting so a token loaded from .env is removed again on teardown.
    monkeypatch.setenv("GITHUB_TOKEN", "unset")
    monkeypatch.delenv("GITHUB_TOKEN")


@pytest.fixture
def api():
    """Mock GitHubClient instance returned by the CLI's client construction."""
    client = MagicMock()
    client.get_authenticated_user.return_value = {"login": "octocat", "name": None}
    client.get_content.side_effect = GitHubError("not found", status_code=404)
    with patch("ghmanager.cli.GitHubClient", return_value=client) as mock_cls:
        client.constructor = mock_cls
        yield client


def test_no_command_prints_help(capsys):
    """Test running without a sub-command shows usage."""
    assert cli.main([]) == 0

    out = capsys.readouterr().out
    assert "create-repo" in out
    assert "setup-dual-license" in out


def test_missing_token(capsys):
    """Test a helpful error without any token."""
    assert cli.main(["list"]) == 1

    err = capsys.readouterr().err
    assert "GITHUB_TOKEN environment variable not set" in err
    assert "https://github.com/settings/tokens" in err


def test_token_from_env(api, monkeypatch):
    """Test GITHUB_TOKEN is used and the user is authenticated once."""
    monkeypatch.setenv("GITHUB_TOKEN", "ghp_env")
    api.list_repos.return_value = []

    assert cli.main(["list"]) == 0

    assert api.constructor.call_args[0][0] == "ghp_env"
    api.get_authenticated_user.assert_called_once()


def test_token_from_dotenv_in_working_directory(api, tmp_path):
    """Test GITHUB_TOKEN is read from a .env file in the current directory."""
    (tmp_path / ".env").write_text("GITHUB_TOKEN=ghp_dotenv\n", encoding="utf-8")
    api.list_repos.return_value = []

    assert cli.main(["list"]) == 0

    assert api.constructor.call_args[0][0] == "ghp_dotenv"


def test_token_from_dotenv_in_parent_directory(api, tmp_path, monkeypatch):
    """Test the .env search walks up from the current directory."""
    (tmp_path / ".env").write_text("GITHUB_TOKEN=ghp_parent\n", encoding="utf-8")
    nested = tmp_path / "work" / "repo"
    nested.mkdir(parents=True)
    monkeypatch.chdir(nested)
    api.list_repos.return_value = []

    assert cli.main(["list"]) == 0

    assert api.constructor.call_args[0][0] == "ghp_parent"


def test_environment_wins_over_dotenv(api, tmp_path, monkeypatch):
    """Test an exported GITHUB_TOKEN is not overridden by .env."""
    (tmp_path / ".env").write_text("GITHUB_TOKEN=ghp_dotenv\n", encoding="utf-8")
    monkeypatch.setenv("GITHUB_TOKEN", "ghp_env")
    api.list_repos.return_value = []

    assert cli.main(["list"]) == 0

    assert api.constructor.call_args[0][0] == "ghp_env"


def test_token_flag_and_config(api, tmp_path, monkeypatch):
    """Test --token wins over the environment; config supplies api_base."""
    monkeypatch.setenv("GITHUB_TOKEN", "ghp_env")
    config = tmp_path / "config.yml"
    config.write_text("api_base: https://ghe.example.test/api/v3\n", encoding="utf-8")
    api.get_repo.return_value = {}

    assert cli.main(["--token", "ghp_flag", "--config", str(config), "info", "hello"]) == 0

    assert api.constructor.call_args[0][0] == "ghp_flag"
    assert api.constructor.call_args[1]["api_base"] == "https://ghe.example.test/api/v3"


def test_token_from_config(api, tmp_path):
    """Test the config file token is the last fallback."""
    config = tmp_path / "config.yml"
    config.write_text("token: ghp_cfg\n", encoding="utf-8")
    api.list_repos.return_value = []

    assert cli.main(["--config", str(config), "list"]) == 0

    assert api.constructor.call_args[0][0] == "ghp_cfg"


def test_create_repo(api):
    """Test create-repo with a description."""
    api.create_repo.return_value = {"html_url": "https://github.com/octocat/hello"}

    assert cli.main(["--token", "t", "create-repo", "hello", "My repo", "--private"]) == 0

    fields = api.create_repo.call_args.kwargs
    assert fields["name"] == "hello"
    assert fields["description"] == "My repo"
    assert fields["private"] is True


def test_clone_settings(api):
    """Test clone-settings dispatch."""
    api.get_repo.return_value = {"topics": []}

    assert cli.main(["--token", "t", "clone-settings", "src", "dst"]) == 0

    api.get_repo.assert_called_once_with("octocat", "src")
    assert api.update_repo.call_args.args == ("octocat", "dst")


def test_setup_dual_license(api):
    """Test setup-dual-license passes the author."""
    with patch("ghmanager.manager.fetch_license_text", return_value="(c) <year> <copyright holders>"):
        assert cli.main(["--token", "t", "setup-dual-license", "lic", "Jane Doe"]) == 0

    paths = [c.args[2] for c in api.put_content.call_args_list]
    assert paths == ["README.md", "LICENSE-MIT", "LICENSE-APACHE"]


def test_setup_rust(api):
    """Test setup-rust with a project name."""
    assert cli.main(["--token", "t", "setup-rust", "my-crate", "engine"]) == 0

    assert api.put_content.call_count == 5


def test_create_from_template(api):
    """Test create-from-template dispatch."""
    api.create_from_template.return_value = {"html_url": "https://github.com/octocat/new"}

    assert cli.main(["--token", "t", "create-from-template", "rust_template", "new", "desc"]) == 0

    api.create_from_template.assert_called_once_with(
        "octocat", "rust_template", name="new", description="desc", private=False
    )


def test_make_template(api):
    """Test make-template dispatch."""
    assert cli.main(["--token", "t", "make-template", "rust_template"]) == 0

    api.update_repo.assert_called_once_with("octocat", "rust_template", is_template=True)


def test_add_topics(api):
    """Test add-topics collects all remaining arguments."""
    assert cli.main(["--token", "t", "add-topics", "hello", "rust", "cli", "template"]) == 0

    api.replace_topics.assert_called_once_with("octocat", "hello", ["rust", "cli", "template"])


def test_add_topics_requires_topic():
    """Test add-topics needs at least one topic."""
    with pytest.raises(SystemExit):
        cli.main(["--token", "t", "add-topics", "hello"])


def test_list_output(api, capsys):
    """Test list prints padded names and descriptions."""
    api.list_repos.return_value = [
        {"name": "hello", "description": "Greetings"},
        {"name": "empty", "description": None},
    ]

    assert cli.main(["--token", "t", "list"]) == 0

    lines = capsys.readouterr().out.splitlines()
    assert lines[0] == "hello".ljust(30) + " Greetings"
    assert lines[1] == "empty".ljust(30) + " "


def test_info_output(api, capsys):
    """Test info prints indented JSON."""
    api.get_repo.return_value = {"name": "hello", "private": False}

    assert cli.main(["--token", "t", "info", "hello"]) == 0

    out = capsys.readouterr().out
    assert json.loads(out) == {"name": "hello", "private": False}
    assert '\n  "name": "hello"' in out


def test_api_error_reports_status(api, capsys):
    """Test API failures print message and HTTP status and exit 1."""
    api.get_repo.side_effect = GitHubError("GitHub API error 404 GET /repos/octocat/nope: Not Found", status_code=404)

    assert cli.main(["--token", "t", "info", "nope"]) == 1

    err = capsys.readouterr().err
    assert "Error: GitHub API error 404" in err
    assert "HTTP Status: 404" in err


def test_connection_error_reported(capsys):
    """Test network failures print an error and exit 1 instead of raising."""
    with patch("ghmanager.github_client.requests.request") as mock_request:
        mock_request.side_effect = requests.ConnectionError("connection refused")

        assert cli.main(["--token", "t", "list"]) == 1

    err = capsys.readouterr().err
    assert "Error: GitHub API request failed GET /user" in err
    assert "connection refused" in err
    assert "HTTP Status" not in err


def test_config_error(capsys, tmp_path):
    """Test a missing explicit config file."""
    assert cli.main(["--token", "t", "--config", str(tmp_path / "nope.yml"), "list"]) == 1

    assert "Config file does not exist" in capsys.readouterr().err
