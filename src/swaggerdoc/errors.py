"""Exceptions raised while generating the API document.

Anything deriving from SwaggerDocError aborts the build: there is no
partially generated document.
"""

PREFIX = "[swaggerdoc]"


class SwaggerDocError(Exception):
    """Base class for all build failures."""


class DirectiveError(SwaggerDocError):
    """A documentation directive is malformed."""

    def __init__(self, message: str, file_path: str | None = None):
        self.file_path = file_path
        where = f" in {file_path}" if file_path else ""
        super().__init__(f"{PREFIX} {message}{where}")


class MissingSchemaError(SwaggerDocError):
    """A request or response names a schema that is not defined."""

    def __init__(self, method: str, route: str, name: str, kind: str = "request"):
        self.method = method
        self.route = route
        self.name = name
        self.kind = kind
        super().__init__(
            f"{PREFIX} error at {method}:{route}, the type of {kind} parameter "
            f"'{name}' does not exist"
        )


class BindingMismatchError(SwaggerDocError):
    """Operation blocks and handler functions of a file do not pair up."""

    def __init__(self, file_path: str, operations: int, handlers: int):
        self.file_path = file_path
        self.operations = operations
        self.handlers = handlers
        super().__init__(
            f"{PREFIX} {file_path} documents {operations} operations "
            f"but declares {handlers} handlers"
        )


class DuplicateRouteError(SwaggerDocError):
    """The same method and route are documented twice."""

    def __init__(self, method: str, route: str):
        self.method = method
        self.route = route
        super().__init__(f"{PREFIX} {method}:{route} is declared more than once")
