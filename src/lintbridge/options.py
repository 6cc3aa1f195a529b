"""Per-project engine options, derived from file-existence probes only."""

from __future__ import annotations

import os

from lintbridge.config import BASELINE_CONFIG, IGNORE_FILE_NAME, RULES_DIR_NAME
from lintbridge.models import EngineOptions


def build_options(project_root: str, has_local_config: bool) -> EngineOptions:
    """Build engine options for a (canonical) project root.

    cwd is always the project root so the engine discovers the project's own
    config. Without a local config the recommended baseline is injected.
    os.path.isdir/isfile report unreadable paths as absent.
    """
    rules_dir = os.path.join(project_root, RULES_DIR_NAME)
    ignore_file = os.path.join(project_root, IGNORE_FILE_NAME)
    has_ignore = os.path.isfile(ignore_file)

    return EngineOptions(
        cwd=project_root,
        base_config=None if has_local_config else dict(BASELINE_CONFIG),
        rule_paths=(rules_dir,) if os.path.isdir(rules_dir) else (),
        ignore=has_ignore,
        ignore_path=ignore_file if has_ignore else None,
    )
