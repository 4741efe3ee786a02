"""Package scanning used to discover resources, repositories and mappers."""

from __future__ import annotations

import importlib
import inspect
import logging
import pkgutil
from types import ModuleType
from typing import Callable, Iterator

from jsonapi_invoker.core.errors import ConfigurationError

logger = logging.getLogger(__name__)


def split_packages(search_package: str) -> list[str]:
    """Split a comma-separated search location into package names."""
    return [name for name in (part.strip() for part in search_package.split(",")) if name]


def _import(name: str) -> ModuleType:
    try:
        return importlib.import_module(name)
    except ImportError as exc:
        raise ConfigurationError(f"cannot import search package '{name}'") from exc


def iter_modules(search_package: str) -> Iterator[ModuleType]:
    """Yield every module under the given packages, recursively."""
    for package_name in split_packages(search_package):
        package = _import(package_name)
        yield package
        if not hasattr(package, "__path__"):
            continue
        for module_info in pkgutil.walk_packages(package.__path__, prefix=f"{package.__name__}."):
            yield _import(module_info.name)


def scan_package(
    search_package: str, predicate: Callable[[type], bool] | None = None
) -> list[type]:
    """Return classes defined in the scanned modules, in discovery order."""
    found: list[type] = []
    seen: set[type] = set()
    for module in iter_modules(search_package):
        for _, cls in inspect.getmembers(module, inspect.isclass):
            if cls.__module__ != module.__name__ or cls in seen:
                continue
            if predicate is not None and not predicate(cls):
                continue
            seen.add(cls)
            found.append(cls)
    logger.debug("Scanned %s: %d matching classes", search_package, len(found))
    return found
