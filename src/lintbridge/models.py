"""Data models: engine options, normalized engine report, inspection report."""

from __future__ import annotations

from dataclasses import dataclass, field, asdict, replace
from enum import Enum
from typing import Any


@dataclass(frozen=True)
class EngineOptions:
    cwd: str
    base_config: dict[str, Any] | None = None
    rule_paths: tuple[str, ...] = ()
    ignore: bool = False
    ignore_path: str | None = None
    fix: bool = False

    def with_fix(self) -> EngineOptions:
        return replace(self, fix=True)

    def to_engine_kwargs(self) -> dict[str, Any]:
        """Keyword arguments for the engine constructor, unset options left out."""
        kwargs: dict[str, Any] = {"cwd": self.cwd}
        if self.base_config is not None:
            kwargs["base_config"] = dict(self.base_config)
        if self.rule_paths:
            kwargs["rule_paths"] = list(self.rule_paths)
        if self.ignore:
            kwargs["ignore"] = True
            kwargs["ignore_path"] = self.ignore_path
        if self.fix:
            kwargs["fix"] = True
        return kwargs


# --- Normalized engine output (1-based positions, engine severities) ---


@dataclass
class LintMessage:
    severity: int
    message: str
    ruleId: str | None
    line: int
    column: int


@dataclass
class LintResult:
    output: str | None = None
    messages: list[LintMessage] = field(default_factory=list)


@dataclass
class NormalizedReport:
    engineVersion: str | None
    results: list[LintResult] = field(default_factory=list)

    def first_output(self) -> str | None:
        return self.results[0].output if self.results else None


# --- Front-end facing report (0-based positions) ---


class InspectionKind(str, Enum):
    ERROR = "error"
    WARNING = "warning"
    META = "meta"


@dataclass
class InspectionResult:
    kind: InspectionKind
    message: str
    line: int
    column: int

    def to_dict(self) -> dict[str, Any]:
        d = asdict(self)
        d["kind"] = self.kind.value
        return d


@dataclass
class InspectionReport:
    errors: list[InspectionResult] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {"errors": [e.to_dict() for e in self.errors]}


@dataclass(frozen=True)
class FixResult:
    output: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {"output": self.output} if self.output else {}
