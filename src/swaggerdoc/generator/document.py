"""Assembly of the final OpenAPI document and the route binding table.

The document is built the first time it is asked for and then kept for the
rest of the process. Changes to the scanned files are not picked up until
the process restarts.
"""

import logging
import threading

from swaggerdoc.config import SwaggerDocConfig
from swaggerdoc.contract import get_definitions
from swaggerdoc.generator.tree import TreeScan, check_operation_ids, scan_tree
from swaggerdoc.parser.base import ControllerBindings, RouteBinding

logger = logging.getLogger(__name__)

DEFAULT_OPENAPI_VERSION = "3.0.3"


class DocumentBuilder:
    """Builds the document once, on first use, and caches it.

    Concurrent first callers wait on the same build. A build that raises
    leaves nothing cached.
    """

    def __init__(self, config: SwaggerDocConfig, schemas: dict[str, dict] | None = None):
        self.config = config
        self._schemas = schemas
        self._lock = threading.Lock()
        # (document, bindings), published together in one store
        self._result: tuple[dict, list[ControllerBindings]] | None = None

    @property
    def built(self) -> bool:
        return self._result is not None

    def document(self) -> dict:
        return self._ensure_built()[0]

    def bindings(self) -> list[ControllerBindings]:
        """Route bindings grouped by controller file."""
        return self._ensure_built()[1]

    def routes(self) -> list[RouteBinding]:
        return [route for controller in self.bindings() for route in controller.routers]

    def _ensure_built(self) -> tuple[dict, list[ControllerBindings]]:
        result = self._result
        if result is not None:
            return result
        with self._lock:
            if self._result is None:
                self._result = self._build()
            return self._result

    def _build(self) -> tuple[dict, list[ControllerBindings]]:
        config = self.config
        schemas = self._schemas if self._schemas is not None else get_definitions(config)

        if config.enable:
            scan = scan_tree(config.scan_root, schemas.keys(), config)
            check_operation_ids(scan.paths)
        else:
            logger.info("document generation is disabled")
            scan = TreeScan()

        document = {
            "openapi": config.openapi or DEFAULT_OPENAPI_VERSION,
            "info": config.api_info.model_dump(),
            "servers": config.servers,
            "tags": scan.tags,
            "paths": scan.paths,
            "components": {
                "schemas": schemas,
                "securitySchemes": config.security_schemes,
            },
        }
        logger.info(
            "built API document from %s: %d tags, %d paths",
            config.scan_root,
            len(scan.tags),
            len(scan.paths),
        )
        return document, scan.bindings


_shared_lock = threading.Lock()
_shared: DocumentBuilder | None = None


def shared_builder(config: SwaggerDocConfig | None = None) -> DocumentBuilder:
    """The process-wide builder. The first call must pass a config."""
    global _shared
    with _shared_lock:
        if _shared is None:
            if config is None:
                raise ValueError("the shared document builder has not been configured")
            _shared = DocumentBuilder(config)
        elif config is not None and config != _shared.config:
            logger.warning("shared document builder already exists, ignoring new config")
        return _shared


def reset_shared_builder() -> None:
    """Forget the shared builder. Only meant for tests."""
    global _shared
    with _shared_lock:
        _shared = None


def get_document(config: SwaggerDocConfig | None = None) -> dict:
    return shared_builder(config).document()


def get_bindings(config: SwaggerDocConfig | None = None) -> list[ControllerBindings]:
    return shared_builder(config).bindings()
