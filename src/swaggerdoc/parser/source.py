"""Readers that pull documentation blocks and handler declarations out of source files.

Each reader answers two questions for one file: which documentation blocks it
holds (controller block first, then operation blocks, in source order) and
which handlers it exports (in declaration order). Handlers are never found by
importing the file.
"""

import ast
import re
from pathlib import Path
from typing import Protocol

from swaggerdoc.parser.base import HandlerRef
from swaggerdoc.parser.directives import is_controller, is_ignored

CONSTRUCTORS = {"constructor", "__init__"}


class SourceReader(Protocol):
    def comment_blocks(self, file_path: Path) -> list[str]: ...

    def handlers(self, file_path: Path) -> list[HandlerRef]: ...


class PythonSourceReader:
    """Reads docstrings from Python handler modules.

    The controller block is the module docstring. When the module docstring
    is not a controller, the first top-level class whose docstring is one
    becomes the controller and its methods are the handlers. Private
    functions are never handlers and their docstrings are not blocks. A public
    function without a docstring is not a handler either.
    """

    def comment_blocks(self, file_path: Path) -> list[str]:
        controller, functions, _ = self._controller(self._parse(file_path))
        if controller is None:
            return []
        blocks = [controller]
        for func in functions:
            doc = ast.get_docstring(func)
            if doc is not None:
                blocks.append(doc)
        return blocks

    def handlers(self, file_path: Path) -> list[HandlerRef]:
        _, functions, owner = self._controller(self._parse(file_path))
        refs = []
        for func in functions:
            # undocumented functions have no block to pair with
            doc = ast.get_docstring(func)
            if doc is None or is_ignored(doc):
                continue
            refs.append(HandlerRef(file_path=file_path, name=func.name, owner=owner))
        return refs

    def _parse(self, file_path: Path) -> ast.Module:
        return ast.parse(file_path.read_text(encoding="utf-8"), filename=str(file_path))

    def _controller(self, tree: ast.Module):
        """Return (controller block, candidate handler functions, owning class name)."""
        module_doc = ast.get_docstring(tree)
        if module_doc is not None and is_controller(module_doc):
            return module_doc, _public_functions(tree.body), None

        for node in tree.body:
            if isinstance(node, ast.ClassDef):
                doc = ast.get_docstring(node)
                if doc is not None and is_controller(doc):
                    return doc, _public_functions(node.body), node.name

        # Not a controller; only the leading docstring is reported.
        return module_doc, [], None


def _public_functions(body: list[ast.stmt]) -> list[ast.FunctionDef | ast.AsyncFunctionDef]:
    return [
        node
        for node in body
        if isinstance(node, (ast.FunctionDef, ast.AsyncFunctionDef))
        and not node.name.startswith("_")
        and node.name not in CONSTRUCTORS
    ]


_JS_TOKENS = re.compile(
    r"(?P<doc>/\*\*.*?\*/)"
    r"|^[ \t]*(?:(?:public|static|async)[ \t]+)*(?P<method>[A-Za-z_$][\w$]*)"
    r"[ \t]*\([^)]*\)[ \t]*(?::[^{;\n]*)?\{"
    r"|^[ \t]*(?:module\.)?exports\.(?P<export>[A-Za-z_$][\w$]*)[ \t]*=",
    re.DOTALL | re.MULTILINE,
)
_JS_KEYWORDS = {"if", "for", "while", "switch", "catch", "function", "return", "with"}


class ScriptSourceReader:
    """Reads ``/** ... */`` blocks and handler declarations from JS/TS controllers.

    Handlers are class methods or ``exports.name =`` assignments in source
    order. A handler documented by an ``@ignore`` block is left out.
    """

    def comment_blocks(self, file_path: Path) -> list[str]:
        text = file_path.read_text(encoding="utf-8")
        return [m.group("doc") for m in _JS_TOKENS.finditer(text) if m.group("doc")]

    def handlers(self, file_path: Path) -> list[HandlerRef]:
        text = file_path.read_text(encoding="utf-8")
        refs = []
        last_doc = None
        for m in _JS_TOKENS.finditer(text):
            if m.group("doc"):
                last_doc = m.group("doc")
                continue

            name = m.group("method") or m.group("export")
            doc, last_doc = last_doc, None
            if name in _JS_KEYWORDS or name in CONSTRUCTORS:
                continue
            if doc is not None and is_ignored(doc):
                continue
            refs.append(HandlerRef(file_path=file_path, name=name))
        return refs


_READERS: dict[str, SourceReader] = {
    ".py": PythonSourceReader(),
    ".js": ScriptSourceReader(),
    ".ts": ScriptSourceReader(),
}


def reader_for(file_path: Path) -> SourceReader | None:
    """Pick a reader from the file extension. Returns None for unknown files."""
    return _READERS.get(file_path.suffix)
