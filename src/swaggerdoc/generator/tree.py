"""Recursive scanning of a controller directory."""

import logging
from collections.abc import Container
from pathlib import Path

from pydantic import BaseModel

from swaggerdoc.config import SwaggerDocConfig
from swaggerdoc.generator.controller import TagNames, add_operation, scan_controller
from swaggerdoc.parser.base import ControllerBindings
from swaggerdoc.parser.source import reader_for

logger = logging.getLogger(__name__)

SKIPPED_DIRS = {"__pycache__", "node_modules"}


class TreeScan(BaseModel):
    tags: list[dict] = []
    paths: dict[str, dict[str, dict]] = {}
    bindings: list[ControllerBindings] = []

    def merge(self, other: "TreeScan", on_duplicate: str = "warn") -> None:
        self.tags.extend(other.tags)
        for route, methods in other.paths.items():
            for method, operation in methods.items():
                add_operation(self.paths, route, method, operation, on_duplicate)
        self.bindings.extend(other.bindings)


def _has_compiled_sibling(file_path: Path, names: set[str], config: SwaggerDocConfig) -> bool:
    compiled = config.compiled_pairs.get(file_path.suffix)
    return compiled is not None and file_path.stem + compiled in names


def scan_tree(
    directory: Path,
    schema_names: Container[str],
    config: SwaggerDocConfig,
    tag_names: TagNames | None = None,
) -> TreeScan:
    """Scan every controller below ``directory`` in sorted order."""
    tag_names = tag_names or TagNames()
    result = TreeScan()

    entries = sorted(directory.iterdir(), key=lambda p: p.name)
    names = {entry.name for entry in entries}
    for entry in entries:
        if entry.name.startswith("."):
            continue

        if entry.is_dir():
            if entry.name in SKIPPED_DIRS:
                continue
            result.merge(scan_tree(entry, schema_names, config, tag_names), config.on_duplicate_route)
            continue

        if not entry.is_file() or entry.suffix not in config.extensions:
            continue
        if _has_compiled_sibling(entry, names, config):
            logger.debug("skipping %s, compiled sibling exists", entry)
            continue
        reader = reader_for(entry)
        if reader is None:
            continue

        scan = scan_controller(entry, reader, schema_names, config, tag_names)
        if scan is None:
            continue
        result.merge(
            TreeScan(tags=[scan.tag], paths=scan.paths, bindings=[scan.bindings]),
            config.on_duplicate_route,
        )

    return result


def check_operation_ids(paths: dict[str, dict[str, dict]]) -> None:
    """Log operationIds shared by different routes."""
    seen: dict[str, str] = {}
    for route, methods in paths.items():
        for method, operation in methods.items():
            op_id = operation.get("operationId")
            where = f"{method}:{route}"
            if op_id in seen:
                logger.warning("operationId %r of %s is also used by %s", op_id, where, seen[op_id])
            else:
                seen[op_id] = where
