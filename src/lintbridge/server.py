"""lintbridge server: stdio JSON-RPC 2.0 loop for the editor front-end."""

from __future__ import annotations

import asyncio
import inspect
import json
import logging
import sys
from typing import Any

from lintbridge.bridge import LintBridge
from lintbridge.config import SERVER_NAME, load_settings
from lintbridge.errors import err
from lintbridge.tools import (
    handle_lint_file,
    handle_fix_file,
    handle_config_file_modified,
    handle_file_changed,
    handle_get_server_info,
)

logger = logging.getLogger(__name__)

_FILE_REQUEST_SCHEMA: dict[str, Any] = {
    "type": "object",
    "properties": {
        "projectRoot": {"type": "string"},
        "fullPath": {"type": "string"},
        "text": {"type": "string"},
        "useEmbeddedFallback": {"type": "boolean"},
    },
    "required": ["projectRoot", "fullPath", "text"],
    "additionalProperties": False,
}

COMMANDS_LIST: list[dict[str, Any]] = [
    {
        "name": "lintFile",
        "description": (
            "Lint the given in-memory text of a file. Always returns a report; "
            "engine resolution problems come back as a single error at 0:0."
        ),
        "async": True,
        "inputSchema": _FILE_REQUEST_SCHEMA,
    },
    {
        "name": "fixFile",
        "description": "Fix the given text using the engine's auto-fixing feature.",
        "async": True,
        "inputSchema": _FILE_REQUEST_SCHEMA,
    },
    {
        "name": "configFileModified",
        "description": "Notify that a config file was modified; drops the project's cached engine.",
        "async": False,
        "inputSchema": {
            "type": "object",
            "properties": {
                "projectRoot": {"type": "string"},
                "useEmbeddedFallback": {"type": "boolean"},
            },
            "required": ["projectRoot"],
            "additionalProperties": False,
        },
    },
    {
        "name": "fileChanged",
        "description": (
            "File-system change event. Forwards to configFileModified when the "
            "name is missing or matches the config file pattern."
        ),
        "async": False,
        "inputSchema": {
            "type": "object",
            "properties": {
                "projectRoot": {"type": "string"},
                "name": {"type": "string"},
                "useEmbeddedFallback": {"type": "boolean"},
            },
            "required": ["projectRoot"],
            "additionalProperties": False,
        },
    },
    {
        "name": "getServerInfo",
        "description": "Server metadata: name, version, commands, supported languages, engine settings.",
        "async": False,
        "inputSchema": {"type": "object", "properties": {}, "additionalProperties": False},
    },
]


class LintBridgeServer:
    """Command routing over stdio JSON-RPC."""

    def __init__(self, bridge: LintBridge) -> None:
        self.bridge = bridge

    async def handle_rpc(self, req: dict[str, Any]) -> dict[str, Any]:
        """Route a single JSON-RPC request to the appropriate handler."""
        rpc_id = req.get("id")
        method = req.get("method", "")
        params = req.get("params") or {}

        if method == "commands/list":
            return self._rpc_ok(rpc_id, {"commands": COMMANDS_LIST})

        handlers = {
            "lintFile": lambda p: handle_lint_file(p, self.bridge),
            "fixFile": lambda p: handle_fix_file(p, self.bridge),
            "configFileModified": lambda p: handle_config_file_modified(p, self.bridge),
            "fileChanged": lambda p: handle_file_changed(p, self.bridge),
            "getServerInfo": lambda p: handle_get_server_info(p, self.bridge, COMMANDS_LIST),
        }

        handler = handlers.get(method)
        if not handler:
            return {
                "jsonrpc": "2.0",
                "id": rpc_id,
                "error": {"code": -32601, "message": f"Method not found: {method}"},
            }

        if not isinstance(params, dict):
            return self._rpc_ok(rpc_id, err("E_INVALID_REQUEST", "params must be an object.", {}))

        try:
            result = handler(params)
            if inspect.isawaitable(result):
                result = await result
            return self._rpc_ok(rpc_id, result)
        except Exception as e:
            logger.exception("Unhandled error in %s", method)
            return self._rpc_ok(
                rpc_id,
                err("E_INTERNAL", "Unhandled server error.", {"exception": str(e)}),
            )

    def _rpc_ok(self, rpc_id: Any, result: Any) -> dict[str, Any]:
        return {"jsonrpc": "2.0", "id": rpc_id, "result": result}


def configure_logging(level: str) -> None:
    """Log to stderr; stdout carries the protocol."""
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(f"[{SERVER_NAME}] %(levelname)s %(name)s: %(message)s"))
    root = logging.getLogger()
    root.handlers[:] = [handler]
    root.setLevel(level)


def main() -> None:
    """Entry point: load config, run stdio JSON-RPC loop on one event loop."""
    settings = load_settings()
    configure_logging(settings.log_level)

    server = LintBridgeServer(LintBridge(settings))
    loop = asyncio.new_event_loop()
    asyncio.set_event_loop(loop)
    logger.info("Serving on stdio (engine module: %s)", settings.engine_module)

    try:
        for line in sys.stdin:
            line = line.strip()
            if not line:
                continue
            try:
                req = json.loads(line)
            except json.JSONDecodeError:
                resp = {
                    "jsonrpc": "2.0",
                    "id": None,
                    "error": {"code": -32700, "message": "Parse error"},
                }
                sys.stdout.write(json.dumps(resp) + "\n")
                sys.stdout.flush()
                continue

            if not isinstance(req, dict):
                resp = {
                    "jsonrpc": "2.0",
                    "id": None,
                    "error": {"code": -32600, "message": "Invalid Request"},
                }
            else:
                resp = loop.run_until_complete(server.handle_rpc(req))
            sys.stdout.write(json.dumps(resp) + "\n")
            sys.stdout.flush()
    finally:
        loop.close()


if __name__ == "__main__":
    main()
