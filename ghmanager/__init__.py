"""
ghmanager package

This package implements a GitHub repository manager as a CLI-first utility.

Key responsibilities are split across modules:
- `github_client.py`: isolated GitHub REST API interactions
- `licenses.py`: official license texts from the SPDX license list
- `renderer.py`: rendering of the bundled scaffold templates
- `config.py`: optional YAML configuration file
- `manager.py`: the repository workflows (create, clone settings, scaffold, topics, ...)
- `cli.py`: CLI entrypoint and sub-command dispatch
"""

from __future__ import annotations

__all__ = ["__version__"]

__version__ = "0.1.0"
