"""Engine adapters: the two supported engine API shapes behind one async contract.

The shape of a loaded engine is decided once, at resolution time, and
recorded in an EngineDescriptor. Everything downstream dispatches on
``descriptor.kind`` only; raw engine results are never sniffed.

Legacy engines are synchronous (``CLIEngine.execute_on_text``) and return a
``{"results": [...]}`` mapping. Modern engines are asynchronous
(``ESLint.lint_text``) and return the list of per-file results directly.
"""

from __future__ import annotations

import inspect
from dataclasses import dataclass
from enum import Enum
from types import ModuleType
from typing import Any, Iterable, Mapping

from lintbridge.models import (
    EngineOptions,
    InspectionKind,
    InspectionReport,
    InspectionResult,
    LintMessage,
    LintResult,
    NormalizedReport,
)

SEVERITY_ERROR = 2
SEVERITY_WARNING = 1

_SEVERITY_KINDS: dict[int, tuple[InspectionKind, str]] = {
    SEVERITY_ERROR: (InspectionKind.ERROR, "ERROR: "),
    SEVERITY_WARNING: (InspectionKind.WARNING, "WARNING: "),
}
_UNKNOWN_KIND = (InspectionKind.META, "UNKNOWN: ")


class EngineKind(str, Enum):
    LEGACY_SYNC = "legacy_sync"
    MODERN_ASYNC = "modern_async"


@dataclass(frozen=True)
class EngineDescriptor:
    kind: EngineKind
    module: ModuleType
    engine_class: type
    version: str | None
    origin: str


class LegacyEngineAdapter:
    """CLIEngine: synchronous, completes immediately."""

    def __init__(self, descriptor: EngineDescriptor) -> None:
        self.descriptor = descriptor

    async def run(self, text: str, file_path: str, options: EngineOptions) -> NormalizedReport:
        cli = self.descriptor.engine_class(**options.to_engine_kwargs())
        raw = cli.execute_on_text(text, file_path)
        return normalize(self.descriptor, raw)


class ModernEngineAdapter:
    """ESLint: lint_text is awaited."""

    def __init__(self, descriptor: EngineDescriptor) -> None:
        self.descriptor = descriptor

    async def run(self, text: str, file_path: str, options: EngineOptions) -> NormalizedReport:
        engine = self.descriptor.engine_class(**options.to_engine_kwargs())
        raw = engine.lint_text(text, file_path=file_path)
        if inspect.isawaitable(raw):
            raw = await raw
        return normalize(self.descriptor, raw)


_ADAPTERS = {
    EngineKind.LEGACY_SYNC: LegacyEngineAdapter,
    EngineKind.MODERN_ASYNC: ModernEngineAdapter,
}


def adapter_for(descriptor: EngineDescriptor) -> LegacyEngineAdapter | ModernEngineAdapter:
    return _ADAPTERS[descriptor.kind](descriptor)


def normalize(descriptor: EngineDescriptor, raw: Any) -> NormalizedReport:
    """Map a raw engine result to a NormalizedReport, keyed on the descriptor kind."""
    if descriptor.kind is EngineKind.LEGACY_SYNC:
        results = raw["results"]
    else:
        results = raw
    return NormalizedReport(
        engineVersion=descriptor.version,
        results=[_to_result(r) for r in results],
    )


def _to_result(raw: Mapping[str, Any]) -> LintResult:
    return LintResult(
        output=raw.get("output"),
        messages=[_to_message(m) for m in raw.get("messages", ())],
    )


def _to_message(raw: Mapping[str, Any]) -> LintMessage:
    return LintMessage(
        severity=raw.get("severity") or 0,
        message=raw.get("message") or "",
        ruleId=raw.get("ruleId"),
        # file-level messages (e.g. ignored files) carry no position
        line=raw.get("line") or 1,
        column=raw.get("column") or 1,
    )


# --- Front-end mapping ---


def major_version(version: str | None) -> int:
    """Major component of an engine version string; 0 if absent or unparseable."""
    if not version:
        return 0
    try:
        return int(version.split(".")[0])
    except ValueError:
        return 0


def map_message(message: LintMessage, major: int) -> InspectionResult:
    offset = 0 if major < 1 else 1
    kind, prefix = _SEVERITY_KINDS.get(message.severity, _UNKNOWN_KIND)

    text = prefix + message.message
    if message.ruleId:
        text += f" [{message.ruleId}]"

    return InspectionResult(
        kind=kind,
        message=text,
        line=message.line - 1,
        column=message.column - offset,
    )


def to_inspection_report(report: NormalizedReport) -> InspectionReport:
    """Inspection report for the single file that was linted (first result)."""
    major = major_version(report.engineVersion)
    messages: Iterable[LintMessage] = report.results[0].messages if report.results else ()
    return InspectionReport(errors=[map_message(m, major) for m in messages])


def user_error(message: str) -> InspectionReport:
    """Single synthetic error at the top of the file."""
    return InspectionReport(
        errors=[InspectionResult(kind=InspectionKind.ERROR, message=message, line=0, column=0)]
    )
