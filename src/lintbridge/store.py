"""In-memory registry of per-project contexts, bounded to the active project."""

from __future__ import annotations

import logging
from collections import OrderedDict
from dataclasses import dataclass

from lintbridge.adapters import EngineDescriptor
from lintbridge.config import MAX_ACTIVE_PROJECTS
from lintbridge.models import EngineOptions

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ProjectContext:
    """Resolved engine + options for one project root. Replaced, never patched."""

    project_root: str
    engine: EngineDescriptor
    options: EngineOptions
    hasLocalConfig: bool


class ProjectRegistry:
    """Project contexts keyed by canonical root, plus the session's active root.

    ``errored_last_time`` starts set so the very first request resolves from
    scratch, the same as a request following an engine failure.
    """

    def __init__(self, max_entries: int = MAX_ACTIVE_PROJECTS) -> None:
        self._contexts: OrderedDict[str, ProjectContext] = OrderedDict()
        self._max_entries = max_entries
        self.active_root: str | None = None
        self.errored_last_time = True

    def __contains__(self, project_root: str) -> bool:
        return project_root in self._contexts

    def __len__(self) -> int:
        return len(self._contexts)

    def get(self, project_root: str) -> ProjectContext | None:
        return self._contexts.get(project_root)

    def put(self, context: ProjectContext) -> None:
        self._contexts[context.project_root] = context
        self._contexts.move_to_end(context.project_root)
        while len(self._contexts) > self._max_entries:
            root, _ = self._contexts.popitem(last=False)
            logger.debug("Evicted context for %s (registry full)", root)

    def evict(self, project_root: str) -> bool:
        removed = self._contexts.pop(project_root, None) is not None
        if removed:
            logger.debug("Evicted context for %s", project_root)
        return removed

    def discard(self, context: ProjectContext) -> bool:
        """Evict ``context`` only if it is still the cached entry for its root."""
        if self._contexts.get(context.project_root) is context:
            return self.evict(context.project_root)
        return False

    def activate(self, project_root: str) -> str | None:
        """Make project_root active, evicting the previously active root's context.

        Returns the previously active root (None if unchanged or first use).
        """
        previous = self.active_root
        if previous == project_root:
            return None
        if previous is not None:
            self.evict(previous)
        self.active_root = project_root
        return previous

    def mark_errored(self) -> None:
        self.errored_last_time = True

    def consume_error(self) -> bool:
        """Return and clear the error flag."""
        errored, self.errored_last_time = self.errored_last_time, False
        return errored
