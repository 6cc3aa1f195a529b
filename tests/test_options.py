"""Tests for per-project engine options."""

from __future__ import annotations

from lintbridge.config import BASELINE_CONFIG
from lintbridge.options import build_options


def test_baseline_injected_without_local_config(tmp_path):
    options = build_options(str(tmp_path), has_local_config=False)
    assert options.cwd == str(tmp_path)
    assert options.base_config == {"extends": "eslint:recommended"}


def test_no_baseline_with_local_config(tmp_path):
    options = build_options(str(tmp_path), has_local_config=True)
    assert options.base_config is None
    assert "base_config" not in options.to_engine_kwargs()


def test_baseline_is_a_copy(tmp_path):
    options = build_options(str(tmp_path), has_local_config=False)
    options.base_config["extends"] = "mutated"
    assert BASELINE_CONFIG == {"extends": "eslint:recommended"}


def test_rules_dir_registered(tmp_path):
    (tmp_path / ".eslintrules").mkdir()
    options = build_options(str(tmp_path), has_local_config=True)
    assert options.rule_paths == (str(tmp_path / ".eslintrules"),)


def test_rules_file_is_not_a_rules_dir(tmp_path):
    (tmp_path / ".eslintrules").write_text("not a directory")
    options = build_options(str(tmp_path), has_local_config=True)
    assert options.rule_paths == ()


def test_ignore_file_enables_ignore(tmp_path):
    (tmp_path / ".eslintignore").write_text("dist/\n")
    options = build_options(str(tmp_path), has_local_config=True)
    assert options.ignore is True
    assert options.ignore_path == str(tmp_path / ".eslintignore")


def test_missing_root_probes_as_absent(tmp_path):
    missing = str(tmp_path / "does-not-exist")
    options = build_options(missing, has_local_config=False)
    assert options.rule_paths == ()
    assert options.ignore is False
    assert options.ignore_path is None


def test_with_fix_leaves_original_untouched(tmp_path):
    options = build_options(str(tmp_path), has_local_config=True)
    fixing = options.with_fix()
    assert fixing.fix is True
    assert options.fix is False
    assert fixing.to_engine_kwargs()["fix"] is True
    assert "fix" not in options.to_engine_kwargs()


def test_engine_kwargs_only_carry_set_options(tmp_path):
    (tmp_path / ".eslintrules").mkdir()
    (tmp_path / ".eslintignore").write_text("")
    kwargs = build_options(str(tmp_path), has_local_config=False).to_engine_kwargs()
    assert kwargs == {
        "cwd": str(tmp_path),
        "base_config": {"extends": "eslint:recommended"},
        "rule_paths": [str(tmp_path / ".eslintrules")],
        "ignore": True,
        "ignore_path": str(tmp_path / ".eslintignore"),
    }
