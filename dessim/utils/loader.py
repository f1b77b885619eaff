"""Resolve ``package.module:function`` setup paths used by the CLI and API."""

from __future__ import annotations

import importlib
from typing import TYPE_CHECKING, Callable

from dessim.core.exceptions import SetupLoadError

if TYPE_CHECKING:
    from dessim.engine.environment import Environment

SetupFunc = Callable[["Environment"], None]


def load_setup(path: str) -> SetupFunc:
    """Import the callable named by *path* (``"pkg.mod:func"``)."""
    module_name, sep, attr = path.partition(":")
    if not sep or not module_name or not attr:
        raise SetupLoadError(f"Expected 'module:function', got {path!r}")
    try:
        module = importlib.import_module(module_name)
    except ImportError as exc:
        raise SetupLoadError(f"Cannot import {module_name!r}: {exc}") from exc
    func = getattr(module, attr, None)
    if not callable(func):
        raise SetupLoadError(f"{module_name!r} has no callable {attr!r}")
    return func
