"""Engine module resolution: local config detection, search path, load, classify.

Resolution touches process-wide state: the working directory, the search-path
environment variable and ``sys.path``. Only one project root's dependency
directory is active at a time; callers serialize resolutions.
"""

from __future__ import annotations

import hashlib
import importlib
import importlib.machinery
import importlib.util
import logging
import os
import sys
from dataclasses import dataclass
from types import ModuleType

from lintbridge.adapters import EngineDescriptor, EngineKind
from lintbridge.config import (
    LEGACY_ENGINE_SYMBOL,
    MODERN_ENGINE_SYMBOL,
    Settings,
    is_config_file,
)
from lintbridge.errors import ModuleLoadError, ModuleResolutionError, UnsupportedEngineError
from lintbridge.paths import dependency_dir

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ResolutionRequest:
    project_root: str
    prior_project_root: str | None
    use_embedded_fallback: bool
    has_local_config: bool

    @property
    def allows_embedded(self) -> bool:
        """Embedded engine only when the project has no config, or on explicit request."""
        return not self.has_local_config or self.use_embedded_fallback


def has_local_config(project_root: str) -> bool:
    """True if the root directory holds a recognized config file.

    An unreadable directory counts as "no config".
    """
    try:
        names = os.listdir(project_root)
    except OSError as e:
        logger.warning("Failed to read contents of %s: %s", project_root, e)
        return False
    return any(is_config_file(name) for name in names)


def _uniq(items: list[str]) -> list[str]:
    seen: set[str] = set()
    result: list[str] = []
    for item in items:
        if item not in seen:
            seen.add(item)
            result.append(item)
    return result


class SearchPath:
    """The process-wide module search path for project-local plugins.

    Mirrors the entries of one environment variable onto the front of
    ``sys.path``. Entries it put on ``sys.path`` are remembered so they can
    be replaced on the next activation.
    """

    def __init__(self, env_var: str) -> None:
        self.env_var = env_var
        self._managed: list[str] = []
        self._current: str | None = None

    @property
    def managed(self) -> list[str]:
        return list(self._managed)

    def entries(self) -> list[str]:
        raw = os.environ.get(self.env_var, "")
        return [p for p in raw.split(os.pathsep) if p]

    def activate(self, current_dir: str, previous_dir: str | None) -> list[str]:
        """Swap previous_dir for current_dir at the head of the search path."""
        entries = self.entries()
        for stale in (previous_dir, self._current):
            if stale and stale != current_dir and stale in entries:
                entries.remove(stale)
        entries = _uniq([current_dir] + entries)
        os.environ[self.env_var] = os.pathsep.join(entries)
        self._current = current_dir
        self._apply(entries)
        return entries

    def _apply(self, entries: list[str]) -> None:
        # only the copies prepended last time
        for path in self._managed:
            if path in sys.path:
                sys.path.remove(path)
            if path not in sys.path:
                sys.path_importer_cache.pop(path, None)
        sys.path[:0] = entries
        self._managed = list(entries)
        importlib.invalidate_caches()


class ModuleResolver:
    """Locates, loads and classifies the engine module for a project."""

    def __init__(self, settings: Settings) -> None:
        self.settings = settings
        self.search_path = SearchPath(settings.search_path_var)

    def resolve(self, request: ResolutionRequest) -> EngineDescriptor:
        root = request.project_root
        prior_dir = (
            dependency_dir(request.prior_project_root, self.settings.dependency_dir)
            if request.prior_project_root
            else None
        )
        self.search_path.activate(dependency_dir(root, self.settings.dependency_dir), prior_dir)
        try:
            os.chdir(root)
        except OSError as e:
            raise ModuleResolutionError(f"Cannot enter project root {root}: {e}", request, root) from e

        if request.allows_embedded:
            name, spec = self._embedded_spec(request)
        else:
            name, spec = self._local_spec(request)

        module = self._load(name, spec, request)
        return self._classify(module, spec.origin or name, request)

    # --- Locating ---

    def _embedded_spec(self, request: ResolutionRequest) -> tuple[str, importlib.machinery.ModuleSpec]:
        name = self.settings.engine_module
        # project dependency dirs are skipped, they only serve plugins
        path = [p for p in sys.path if p not in self.search_path.managed]
        spec = importlib.machinery.PathFinder.find_spec(name, path)
        if spec is None or spec.loader is None:
            logger.error("Wasn't able to resolve path to embedded %s", name)
            raise ModuleResolutionError(f"Wasn't able to resolve path to {name}.", request)
        return name, spec

    def _local_spec(self, request: ResolutionRequest) -> tuple[str, importlib.machinery.ModuleSpec]:
        package_dir = os.path.join(
            dependency_dir(request.project_root, self.settings.dependency_dir),
            self.settings.engine_module,
        )
        init_file = os.path.join(package_dir, "__init__.py")
        if not os.path.isfile(init_file):
            logger.error("Wasn't able to resolve path to %s in %s", self.settings.engine_module, package_dir)
            raise ModuleResolutionError(
                f"Wasn't able to resolve path to {self.settings.engine_module}.", request, package_dir
            )

        digest = hashlib.sha1(package_dir.encode("utf-8")).hexdigest()[:12]
        name = f"_lintbridge_local_{self.settings.engine_module}_{digest}"
        spec = importlib.util.spec_from_file_location(
            name, init_file, submodule_search_locations=[package_dir]
        )
        if spec is None or spec.loader is None:
            raise ModuleResolutionError(
                f"Wasn't able to resolve path to {self.settings.engine_module}.", request, package_dir
            )
        return name, spec

    # --- Loading ---

    def _load(
        self,
        name: str,
        spec: importlib.machinery.ModuleSpec,
        request: ResolutionRequest,
    ) -> ModuleType:
        """Execute the module afresh, replacing any previously loaded copy."""
        for key in [k for k in sys.modules if k == name or k.startswith(name + ".")]:
            del sys.modules[key]

        module = importlib.util.module_from_spec(spec)
        sys.modules[name] = module
        try:
            spec.loader.exec_module(module)  # type: ignore[union-attr]
        except Exception as e:
            sys.modules.pop(name, None)
            logger.exception(
                "Wasn't able to load %s from %s, be sure to install it properly",
                self.settings.engine_module,
                spec.origin,
            )
            raise ModuleLoadError(
                f"Wasn't able to load {self.settings.engine_module} from {spec.origin}, "
                "be sure to install it properly.",
                request,
                spec.origin,
            ) from e
        return module

    def _classify(self, module: ModuleType, origin: str, request: ResolutionRequest) -> EngineDescriptor:
        legacy = getattr(module, LEGACY_ENGINE_SYMBOL, None)
        if legacy is not None:
            kind, engine_class = EngineKind.LEGACY_SYNC, legacy
        else:
            modern = getattr(module, MODERN_ENGINE_SYMBOL, None)
            if modern is None:
                logger.error(
                    "No %s or %s classes found for engine loaded from %s",
                    LEGACY_ENGINE_SYMBOL,
                    MODERN_ENGINE_SYMBOL,
                    origin,
                )
                raise UnsupportedEngineError(
                    f"No {LEGACY_ENGINE_SYMBOL} or {MODERN_ENGINE_SYMBOL} classes found for engine "
                    f"loaded from {origin}, which version are you using?",
                    request,
                    origin,
                )
            kind, engine_class = EngineKind.MODERN_ASYNC, modern

        version = getattr(engine_class, "version", None) or getattr(module, "__version__", None)
        logger.info("Loaded %s engine %s from %s", kind.value, version or "(unknown version)", origin)
        return EngineDescriptor(
            kind=kind,
            module=module,
            engine_class=engine_class,
            version=str(version) if version else None,
            origin=origin,
        )
