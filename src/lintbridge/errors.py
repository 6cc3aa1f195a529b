"""Error taxonomy and structured error/success envelopes."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from lintbridge.resolver import ResolutionRequest


class BridgeError(Exception):
    """Base class for every failure the bridge reports to a caller."""

    code = "E_INTERNAL"

    def details(self) -> dict[str, Any]:
        return {}


class EngineResolutionError(BridgeError):
    """Resolution phase failed; carries the request that was being resolved."""

    def __init__(self, message: str, request: ResolutionRequest, path: str | None = None) -> None:
        super().__init__(message)
        self.request = request
        self.path = path

    def details(self) -> dict[str, Any]:
        return {
            "projectRoot": self.request.project_root,
            "path": self.path,
            "hasLocalConfig": self.request.has_local_config,
        }


class ModuleResolutionError(EngineResolutionError):
    """No engine could be located at all."""

    code = "E_MODULE_RESOLUTION"


class ModuleLoadError(EngineResolutionError):
    """An engine was located but failed to initialize."""

    code = "E_MODULE_LOAD"


class UnsupportedEngineError(EngineResolutionError):
    """The loaded module exposes neither supported API shape."""

    code = "E_UNSUPPORTED_ENGINE"


class EngineExecutionError(BridgeError):
    """The engine raised while linting or fixing."""

    code = "E_ENGINE_EXECUTION"

    def __init__(self, message: str, project_root: str, file_path: str) -> None:
        super().__init__(message)
        self.project_root = project_root
        self.file_path = file_path

    def details(self) -> dict[str, Any]:
        return {"projectRoot": self.project_root, "filePath": self.file_path}


def err(
    code: str,
    message: str,
    details: dict[str, Any] | None = None,
    next_steps: list[dict[str, Any]] | None = None,
) -> dict[str, Any]:
    """Build a structured error envelope."""
    return {
        "ok": False,
        "error": {
            "code": code,
            "message": message,
            "details": details or {},
            "nextSteps": next_steps or [],
        },
    }


def err_from(exc: BridgeError, next_steps: list[dict[str, Any]] | None = None) -> dict[str, Any]:
    """Build an error envelope from a bridge exception."""
    return err(exc.code, str(exc), exc.details(), next_steps)


def ok(result: dict[str, Any]) -> dict[str, Any]:
    """Build a structured success envelope."""
    return {"ok": True, "result": result}
