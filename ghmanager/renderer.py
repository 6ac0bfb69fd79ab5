"""
renderer.py

Responsibility: Deterministically render the bundled scaffold templates into memory.

Rules:
- Walk template files in sorted order to ensure deterministic output.
- If Jinja2 markers are present, render with the provided context.
- Files without markers are returned exactly as authored.

This module intentionally does NOT know about GitHub or CLI parsing; the rendered
text is pushed to a repository by the manager.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

from jinja2 import Environment, StrictUndefined

TEMPLATES_DIR = Path(__file__).resolve().parent / "templates"


class RenderError(RuntimeError):
    pass


def _environment() -> Environment:
    return Environment(
        autoescape=False,
        undefined=StrictUndefined,
        keep_trailing_newline=True,
    )


def _resolve_template_dir(template_dir: str | Path) -> Path:
    tpl_dir = Path(template_dir)
    if not tpl_dir.is_absolute():
        tpl_dir = TEMPLATES_DIR / tpl_dir
    tpl_dir = tpl_dir.resolve()
    if not tpl_dir.exists() or not tpl_dir.is_dir():
        raise RenderError(f"Template directory not found: {tpl_dir}")
    return tpl_dir


def _iter_template_files(template_dir: Path) -> list[Path]:
    """
    Return all files under template_dir, in deterministic lexicographic order
    (relative path ordering).
    """
    files: list[Path] = []
    for root, _dirs, filenames in os.walk(template_dir):
        root_path = Path(root)
        for name in filenames:
            files.append(root_path / name)
    files.sort(key=lambda p: str(p.relative_to(template_dir)).replace(os.sep, "/"))
    return files


def _render_text(text: str, rel: str, context: dict[str, Any], env: Environment) -> str:
    if ("{{" not in text) and ("{%" not in text) and ("{#" not in text):
        return text
    try:
        return env.from_string(text).render(**context)
    except Exception as e:  # noqa: BLE001 - surface as RenderError
        raise RenderError(f"Failed rendering template file: {rel}") from e


def render_template(template_dir: str | Path, rel_path: str, context: dict[str, Any]) -> str:
    """
    Render a single file of a template directory.

    `template_dir` may be a bundled template name (e.g. "rust") or a path.
    """
    tpl_dir = _resolve_template_dir(template_dir)
    src_path = tpl_dir / rel_path
    if not src_path.is_file():
        raise RenderError(f"Template file not found: {rel_path} in {tpl_dir}")
    text = src_path.read_text(encoding="utf-8")
    return _render_text(text, rel_path, context, _environment())


def render_template_dir(template_dir: str | Path, context: dict[str, Any]) -> dict[str, str]:
    """
    Render every file of a template directory.

    Returns a mapping of relative POSIX path -> rendered text, in sorted path order.
    """
    tpl_dir = _resolve_template_dir(template_dir)
    env = _environment()

    out: dict[str, str] = {}
    for src_path in _iter_template_files(tpl_dir):
        rel = str(src_path.relative_to(tpl_dir)).replace(os.sep, "/")
        text = src_path.read_text(encoding="utf-8")
        out[rel] = _render_text(text, rel, context, env)
    return out
