"""Data models shared by the readers and the document generator."""

import hashlib
import importlib.util
import sys
from pathlib import Path
from types import ModuleType
from typing import Any

from pydantic import BaseModel

_HANDLER_MODULES: dict[Path, ModuleType] = {}


def load_handler_module(file_path: Path) -> ModuleType:
    """Import a handler file once. Later calls return the same module."""
    file_path = file_path.resolve()
    module = _HANDLER_MODULES.get(file_path)
    if module is not None:
        return module

    digest = hashlib.sha1(str(file_path).encode("utf-8")).hexdigest()[:12]
    module_name = f"_swaggerdoc_handlers_{file_path.stem}_{digest}"
    spec = importlib.util.spec_from_file_location(module_name, file_path)
    module = importlib.util.module_from_spec(spec)
    sys.modules[module_name] = module
    try:
        spec.loader.exec_module(module)
    except Exception:
        del sys.modules[module_name]
        raise
    _HANDLER_MODULES[file_path] = module
    return module


class HandlerRef(BaseModel):
    """A handler function, identified by the file and name that declare it."""

    file_path: Path
    name: str
    owner: str | None = None  # class holding the handler, if any

    def resolve(self) -> Any:
        """Return the handler object, importing its Python module on first use."""
        if self.file_path.suffix != ".py":
            raise ValueError(f"cannot import handlers from {self.file_path}")

        module = load_handler_module(self.file_path)
        target = getattr(module, self.owner) if self.owner else module
        return getattr(target, self.name)

    def __str__(self) -> str:
        qualified = f"{self.owner}.{self.name}" if self.owner else self.name
        return f"{self.file_path}:{qualified}"


class RouteBinding(BaseModel):
    """One documented route and the handler that serves it."""

    method: str  # lowercase: get / post / put / ...
    route: str  # /api/ledgers/{id}
    handler: HandlerRef | None
    rule_name: str | None = None  # schema of the request body, if declared


class ControllerBindings(BaseModel):
    """All route bindings found in one controller file."""

    file_path: Path
    tag: str
    routers: list[RouteBinding] = []
