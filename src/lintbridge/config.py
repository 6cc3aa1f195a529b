"""Configuration: engine/module names, project file conventions, env settings."""

from __future__ import annotations

import logging
import os
import re
from dataclasses import dataclass

SERVER_NAME = "lintbridge"
SERVER_VERSION = "0.1.0"

CONFIG_FILE_PATTERN = re.compile(r"^\.eslintrc(\.(js|yaml|yml|json))?$", re.IGNORECASE)
RULES_DIR_NAME = ".eslintrules"
IGNORE_FILE_NAME = ".eslintignore"
TYPESCRIPT_SUFFIXES = (".ts", ".tsx")
SUPPORTED_LANGUAGE_IDS = ("javascript", "jsx", "typescript", "tsx", "vue")

BASELINE_CONFIG = {"extends": "eslint:recommended"}

LEGACY_ENGINE_SYMBOL = "CLIEngine"
MODERN_ENGINE_SYMBOL = "ESLint"

MAX_ACTIVE_PROJECTS = 1  # one set of search-path entries can be active at a time


@dataclass(frozen=True)
class Settings:
    engine_module: str = "eslint"
    dependency_dir: str = "node_modules"
    search_path_var: str = "NODE_PATH"
    log_level: str = "INFO"


def is_config_file(name: str) -> bool:
    """True if a bare file name is a recognized engine config file."""
    return bool(CONFIG_FILE_PATTERN.match(name))


def load_settings() -> Settings:
    """Load settings from LINTBRIDGE_* env vars.

    Every variable is optional; an invalid value fails closed.
    """
    defaults = Settings()
    engine_module = os.environ.get("LINTBRIDGE_ENGINE_MODULE", "").strip() or defaults.engine_module
    if not engine_module.isidentifier():
        raise RuntimeError(
            f"LINTBRIDGE_ENGINE_MODULE must be a top-level module name, got {engine_module!r}"
        )

    dependency_dir = os.environ.get("LINTBRIDGE_DEPENDENCY_DIR", "").strip() or defaults.dependency_dir
    if os.path.isabs(dependency_dir) or os.sep in dependency_dir:
        raise RuntimeError(
            "LINTBRIDGE_DEPENDENCY_DIR must be a directory name relative to the project root, "
            f"got {dependency_dir!r}"
        )

    search_path_var = os.environ.get("LINTBRIDGE_SEARCH_PATH_VAR", "").strip() or defaults.search_path_var

    log_level = (os.environ.get("LINTBRIDGE_LOG_LEVEL", "").strip() or defaults.log_level).upper()
    if not isinstance(logging.getLevelName(log_level), int):
        raise RuntimeError(f"LINTBRIDGE_LOG_LEVEL is not a logging level: {log_level!r}")

    return Settings(
        engine_module=engine_module,
        dependency_dir=dependency_dir,
        search_path_var=search_path_var,
        log_level=log_level,
    )
