"""Tests for project-root canonicalization, root confinement and engine paths."""

from __future__ import annotations

import os

from lintbridge.paths import canonical_root, dependency_dir, engine_file_path, is_under_root


def test_trailing_separator_stripped(tmp_path):
    root = str(tmp_path)
    assert canonical_root(root + os.sep) == root
    assert canonical_root(root + os.sep + os.sep) == root


def test_relative_root_made_absolute(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    assert canonical_root("project/") == os.path.join(str(tmp_path), "project")


def test_filesystem_root_kept():
    assert canonical_root(os.sep) == os.path.abspath(os.sep)


def test_child_is_under_root(tmp_path):
    root = str(tmp_path)
    child = os.path.join(root, "src", "app.js")
    assert is_under_root(child, root)


def test_root_is_under_itself(tmp_path):
    root = str(tmp_path)
    assert is_under_root(root, root)


def test_sibling_is_not_under_root(tmp_path):
    root = os.path.join(str(tmp_path), "project")
    sibling = os.path.join(str(tmp_path), "project-other", "app.js")
    assert not is_under_root(sibling, root)


def test_traversal_escape(tmp_path):
    root = str(tmp_path)
    escape = os.path.join(root, "..", "..", "etc", "passwd")
    assert not is_under_root(escape, root)


def test_engine_path_relative_inside_root(tmp_path):
    root = str(tmp_path)
    full = os.path.join(root, "src", "app.js")
    assert engine_file_path(full, root) == os.path.join("src", "app.js")


def test_engine_path_absolute_outside_root(tmp_path):
    root = os.path.join(str(tmp_path), "project")
    outside = os.path.join(str(tmp_path), "elsewhere", "app.js")
    assert engine_file_path(outside, root) == outside


def test_dependency_dir(tmp_path):
    root = str(tmp_path) + os.sep
    assert dependency_dir(root, "node_modules") == os.path.join(str(tmp_path), "node_modules")
