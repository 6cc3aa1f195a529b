"""Command handlers: lintFile, fixFile, configFileModified, fileChanged, getServerInfo."""

from __future__ import annotations

import logging
import platform
from typing import Any

from lintbridge.bridge import LintBridge
from lintbridge.config import SERVER_NAME, SERVER_VERSION, SUPPORTED_LANGUAGE_IDS, is_config_file
from lintbridge.errors import BridgeError, EngineExecutionError, err, err_from, ok

logger = logging.getLogger(__name__)


class InvalidRequest(ValueError):
    pass


def _require_str(args: dict[str, Any], key: str) -> str:
    value = args.get(key)
    if not isinstance(value, str) or not value:
        raise InvalidRequest(f"'{key}' must be a non-empty string.")
    return value


def _flag(args: dict[str, Any], key: str = "useEmbeddedFallback") -> bool:
    value = args.get(key, False)
    if not isinstance(value, bool):
        raise InvalidRequest(f"'{key}' must be a boolean.")
    return value


async def handle_lint_file(args: dict[str, Any], bridge: LintBridge) -> dict[str, Any]:
    """Lint a file's in-memory text and return an inspection report."""
    try:
        project_root = _require_str(args, "projectRoot")
        full_path = _require_str(args, "fullPath")
        text = args.get("text")
        if not isinstance(text, str):
            raise InvalidRequest("'text' must be a string.")
        use_embedded = _flag(args)
    except InvalidRequest as e:
        return err("E_INVALID_REQUEST", str(e), {"command": "lintFile"})

    try:
        report = await bridge.lint_file(project_root, full_path, text, use_embedded)
    except EngineExecutionError as e:
        return err_from(e, next_steps=[{
            "action": "RETRY",
            "tool": "lintFile",
            "note": "The engine is re-resolved from scratch on the next lint.",
        }])
    return ok(report.to_dict())


async def handle_fix_file(args: dict[str, Any], bridge: LintBridge) -> dict[str, Any]:
    """Auto-fix a file's in-memory text. Empty result means no changes."""
    try:
        project_root = _require_str(args, "projectRoot")
        full_path = _require_str(args, "fullPath")
        text = args.get("text")
        if not isinstance(text, str):
            raise InvalidRequest("'text' must be a string.")
        use_embedded = _flag(args)
    except InvalidRequest as e:
        return err("E_INVALID_REQUEST", str(e), {"command": "fixFile"})

    try:
        result = await bridge.fix_file(project_root, full_path, text, use_embedded)
    except BridgeError as e:
        logger.error("fixFile -> error: %s", e)
        return err_from(e)
    return ok(result.to_dict())


def handle_config_file_modified(args: dict[str, Any], bridge: LintBridge) -> dict[str, Any]:
    """Drop the cached engine/options for a root and mark it active."""
    try:
        project_root = _require_str(args, "projectRoot")
        use_embedded = _flag(args)
    except InvalidRequest as e:
        return err("E_INVALID_REQUEST", str(e), {"command": "configFileModified"})

    evicted = bridge.config_file_modified(project_root, use_embedded)
    return ok({"evicted": evicted, "activeRoot": bridge.registry.active_root})


def handle_file_changed(args: dict[str, Any], bridge: LintBridge) -> dict[str, Any]:
    """File-system change event; only config files (or unnamed changes) invalidate."""
    try:
        project_root = _require_str(args, "projectRoot")
        name = args.get("name")
        if name is not None and not isinstance(name, str):
            raise InvalidRequest("'name' must be a string.")
        use_embedded = _flag(args)
    except InvalidRequest as e:
        return err("E_INVALID_REQUEST", str(e), {"command": "fileChanged"})

    if name and not is_config_file(name):
        return ok({"configChanged": False})

    bridge.config_file_modified(project_root, use_embedded)
    return ok({"configChanged": True})


def handle_get_server_info(
    _args: dict[str, Any],
    bridge: LintBridge,
    commands: list[dict[str, Any]],
) -> dict[str, Any]:
    """Server metadata: name, version, platform, commands and engine settings."""
    settings = bridge.settings
    return ok({
        "name": SERVER_NAME,
        "version": SERVER_VERSION,
        "python": platform.python_version(),
        "platform": platform.system(),
        "commands": [c["name"] for c in commands],
        "supportedLanguageIds": list(SUPPORTED_LANGUAGE_IDS),
        "engine": {
            "module": settings.engine_module,
            "dependencyDir": settings.dependency_dir,
            "searchPathVar": settings.search_path_var,
        },
        "activeRoot": bridge.registry.active_root,
    })
