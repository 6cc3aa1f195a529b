"""Lint and fix orchestration over the project registry.

lint_file and fix_file share one lock: the search path, the working
directory and the active root are process-wide, so at most one request may
be resolving or running an engine at a time. config_file_modified is a
synchronous notification and may land while a request is suspended inside a
modern engine call; a suspended request only ever discards the exact
context it ran with.
"""

from __future__ import annotations

import asyncio
import logging
import os

from lintbridge.adapters import adapter_for, to_inspection_report, user_error
from lintbridge.config import TYPESCRIPT_SUFFIXES, Settings
from lintbridge.errors import EngineExecutionError, EngineResolutionError
from lintbridge.models import FixResult, InspectionReport
from lintbridge.options import build_options
from lintbridge.paths import canonical_root, engine_file_path
from lintbridge.resolver import ModuleResolver, ResolutionRequest, has_local_config
from lintbridge.store import ProjectContext, ProjectRegistry

logger = logging.getLogger(__name__)

MSG_INSTALL_LOCAL = "ESLintError: You need to install ESLint in your project folder with 'npm install eslint'"
MSG_NO_EMBEDDED = "ESLintError: No ESLint cli is available, try reinstalling the extension"


class LintBridge:
    """Command surface for the editor front-end: lint, fix, config-changed."""

    def __init__(
        self,
        settings: Settings,
        registry: ProjectRegistry | None = None,
        resolver: ModuleResolver | None = None,
    ) -> None:
        self.settings = settings
        self.registry = registry or ProjectRegistry()
        self.resolver = resolver or ModuleResolver(settings)
        self._lock = asyncio.Lock()

    # --- Commands ---

    async def lint_file(
        self,
        project_root: str,
        full_path: str,
        text: str,
        use_embedded_fallback: bool = False,
    ) -> InspectionReport:
        """Lint in-memory text; resolution failures come back as a one-error report.

        Raises EngineExecutionError if the engine itself fails.
        """
        root = canonical_root(project_root)
        async with self._lock:
            if self.registry.consume_error():
                self.registry.evict(root)

            try:
                context = self._prepare(root, use_embedded_fallback)
            except EngineResolutionError as e:
                self.registry.mark_errored()
                if e.request.has_local_config:
                    return user_error(MSG_INSTALL_LOCAL)
                return user_error(MSG_NO_EMBEDDED)

            if full_path.endswith(TYPESCRIPT_SUFFIXES) and not context.hasLocalConfig:
                return InspectionReport()

            file_path = engine_file_path(full_path, root)
            report = await self._execute(context, text, file_path, fix=False)
            return to_inspection_report(report)

    async def fix_file(
        self,
        project_root: str,
        full_path: str,
        text: str,
        use_embedded_fallback: bool = False,
    ) -> FixResult:
        """Auto-fix in-memory text; the result's output is None when nothing changed.

        Raises EngineResolutionError subclasses and EngineExecutionError.
        """
        root = canonical_root(project_root)
        async with self._lock:
            context = self._prepare(root, use_embedded_fallback)
            report = await self._execute(context, text, full_path, fix=True)
            return FixResult(output=report.first_output())

    def config_file_modified(self, project_root: str, use_embedded_fallback: bool = False) -> bool:
        """A config file changed on disk: drop the root's context and make it active."""
        root = canonical_root(project_root)
        evicted = self.registry.evict(root)
        self.registry.activate(root)
        logger.info("Config changed for %s (cached context dropped: %s)", root, evicted)
        return evicted

    # --- Internal helpers ---

    def _prepare(self, root: str, use_embedded_fallback: bool) -> ProjectContext:
        """Cached context for root, rebuilt atomically when missing."""
        previous = self.registry.activate(root)
        context = self.registry.get(root)
        if context is not None:
            return context

        request = ResolutionRequest(
            project_root=root,
            prior_project_root=previous,
            use_embedded_fallback=use_embedded_fallback,
            has_local_config=has_local_config(root),
        )
        engine = self.resolver.resolve(request)
        context = ProjectContext(
            project_root=root,
            engine=engine,
            options=build_options(root, request.has_local_config),
            hasLocalConfig=request.has_local_config,
        )
        self.registry.put(context)
        return context

    async def _execute(self, context: ProjectContext, text: str, file_path: str, fix: bool):
        options = context.options.with_fix() if fix else context.options
        try:
            return await adapter_for(context.engine).run(text, file_path, options)
        except Exception as e:
            action = "fix" if fix else "lint"
            logger.exception("Engine failed to %s %s", action, file_path)
            self.registry.mark_errored()
            self.registry.discard(context)
            raise EngineExecutionError(
                f"Engine failed to {action} {os.path.basename(file_path)}: {e}",
                context.project_root,
                file_path,
            ) from e
