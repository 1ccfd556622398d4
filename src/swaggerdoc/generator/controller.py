"""Scanning of a single controller file into tags, paths and route bindings."""

import logging
from collections.abc import Container
from pathlib import Path

from pydantic import BaseModel

from swaggerdoc.config import SwaggerDocConfig
from swaggerdoc.errors import BindingMismatchError, DuplicateRouteError
from swaggerdoc.generator.operation import build_operation, contract_name
from swaggerdoc.parser.base import ControllerBindings, RouteBinding
from swaggerdoc.parser.directives import is_controller, is_ignored, parse_controller, parse_operation
from swaggerdoc.parser.source import SourceReader

logger = logging.getLogger(__name__)


class ControllerScan(BaseModel):
    """What one controller file contributes to the document."""

    tag: dict  # {"name": ..., "description": ...}
    paths: dict[str, dict[str, dict]]
    bindings: ControllerBindings


class TagNames:
    """Tag names handed out during one traversal.

    A name that was already taken gets ``_<n>`` appended, n being the number
    of names seen so far.
    """

    def __init__(self):
        self._seen: list[str] = []

    def claim(self, name: str) -> str:
        if name in self._seen:
            count = len(self._seen)
            candidate = f"{name}_{count}"
            while candidate in self._seen:
                count += 1
                candidate = f"{name}_{count}"
            logger.warning("tag %r is already used, renamed to %r", name, candidate)
            name = candidate
        self._seen.append(name)
        return name


def add_operation(paths: dict, route: str, method: str, operation: dict, on_duplicate: str = "warn") -> None:
    """Put an operation under its route, keeping the other methods of that route."""
    methods = paths.setdefault(route, {})
    if method in methods:
        if on_duplicate == "error":
            raise DuplicateRouteError(method, route)
        logger.warning("%s:%s is declared more than once, the last declaration wins", method, route)
    methods[method] = operation


def scan_controller(
    file_path: Path,
    reader: SourceReader,
    schema_names: Container[str],
    config: SwaggerDocConfig,
    tag_names: TagNames,
) -> ControllerScan | None:
    """Scan one file. Returns None when the file is not a controller."""
    blocks = reader.comment_blocks(file_path)
    if not blocks or not is_controller(blocks[0]):
        return None

    controller = parse_controller(blocks[0])
    tag_name = tag_names.claim(controller.name or file_path.stem)
    logger.debug("scanning controller %s as tag %r", file_path, tag_name)

    operations = [parse_operation(block, str(file_path)) for block in blocks[1:] if not is_ignored(block)]
    handlers = reader.handlers(file_path)
    if len(operations) != len(handlers):
        if config.strict_binding:
            raise BindingMismatchError(str(file_path), len(operations), len(handlers))
        logger.warning(
            "%s documents %d operations but declares %d handlers, bindings may be wrong",
            file_path,
            len(operations),
            len(handlers),
        )

    paths: dict[str, dict[str, dict]] = {}
    bindings = ControllerBindings(file_path=file_path, tag=tag_name)
    for index, op in enumerate(operations):
        method, route = op.router.method, op.router.path
        operation = build_operation(op, tag_name, schema_names, config)
        add_operation(paths, route, method, operation, config.on_duplicate_route)

        bindings.routers.append(
            RouteBinding(
                method=method,
                route=route,
                handler=handlers[index] if index < len(handlers) else None,
                rule_name=contract_name(op, schema_names),
            )
        )

    return ControllerScan(
        tag={"name": tag_name, "description": controller.description},
        paths=paths,
        bindings=bindings,
    )
