"""Path utilities: project-root canonicalization, root confinement, engine file paths."""

from __future__ import annotations

import os


def canonical_root(path: str) -> str:
    """Canonical cache key for a project root.

    Absolute and normalized, with any trailing separator stripped
    (a bare filesystem root such as "/" is kept as-is).
    """
    root = os.path.normpath(os.path.abspath(path))
    stripped = root.rstrip("\\/")
    return stripped or root


def is_under_root(target_abs: str, root_abs: str) -> bool:
    """Check if target is inside root using normcase'd normalized comparison."""
    t = os.path.normcase(os.path.normpath(target_abs))
    r = os.path.normcase(os.path.normpath(root_abs))
    if not r.endswith(os.sep):
        r += os.sep
    return t.startswith(r) or t == r.rstrip(os.sep)


def engine_file_path(full_path: str, root: str) -> str:
    """Path handed to the engine for a lint pass.

    Relative to the project root when the file lives under it,
    otherwise the absolute path unchanged.
    """
    if os.path.isabs(full_path) and is_under_root(full_path, root):
        return os.path.relpath(full_path, root)
    return full_path


def dependency_dir(root: str, dir_name: str) -> str:
    """Absolute path of the project's dependency directory."""
    return os.path.join(canonical_root(root), dir_name)
