"""Typed views over the directives of one documentation block.

Blocks are parsed into these models before any document assembly, so a
malformed directive is reported with the file it came from rather than
somewhere deep inside operation building.
"""

from pydantic import BaseModel

from swaggerdoc.errors import DirectiveError
from swaggerdoc.parser import tags

HTTP_METHODS = ("get", "put", "post", "delete", "options", "head", "patch", "trace")
LOCATIONS = ("body", "query", "path", "header", "cookie")


class ControllerDirective(BaseModel):
    """``@controller [name] [description...]``"""

    name: str | None = None
    description: str = ""


class RouterDirective(BaseModel):
    """``@router <method> <path>``"""

    method: str
    path: str


class RequestDirective(BaseModel):
    """``@request <location> <type> [name[*]] [words...]``"""

    location: str
    type_token: str
    name_token: str | None = None
    words: list[str] = []

    @property
    def is_body(self) -> bool:
        return self.location == "body"


class ResponseDirective(BaseModel):
    """``@response <status> [type] [words...]``"""

    status: str
    type_token: str | None = None
    words: list[str] = []


class OperationBlock(BaseModel):
    """Everything one operation block declares."""

    block: str
    router: RouterDirective
    summary: str = ""
    description: str = ""
    requests: list[RequestDirective] = []
    responses: list[ResponseDirective] = []
    consumes: list[str] = []
    produces: list[str] = []
    deprecated: bool = False

    def has_directive(self, name: str) -> bool:
        """Exact-case check, used for security scheme names."""
        return tags.has_directive(self.block, name, case_sensitive=True)


def is_controller(block: str) -> bool:
    return tags.has_directive(block, tags.CONTROLLER)


def is_ignored(block: str) -> bool:
    return tags.has_directive(block, tags.IGNORE)


def parse_controller(block: str) -> ControllerDirective:
    args = tags.get_directives(block, tags.CONTROLLER)[0]
    if not args:
        return ControllerDirective()
    return ControllerDirective(name=args[0], description=" ".join(args[1:]))


def parse_router(args: tuple[str, ...], file_path: str | None = None) -> RouterDirective:
    if len(args) < 2:
        raise DirectiveError(f"@router needs a method and a path, got {' '.join(args)!r}", file_path)
    method = args[0].lower()
    if method not in HTTP_METHODS:
        raise DirectiveError(f"unknown HTTP method {args[0]!r} in @router", file_path)
    return RouterDirective(method=method, path=args[1])


def parse_request(args: tuple[str, ...], file_path: str | None = None) -> RequestDirective:
    if len(args) < 2:
        raise DirectiveError(f"@request needs a location and a type, got {' '.join(args)!r}", file_path)
    location = args[0].lower()
    if location not in LOCATIONS:
        raise DirectiveError(f"unknown @request location {args[0]!r}", file_path)
    return RequestDirective(
        location=location,
        type_token=args[1],
        name_token=args[2] if len(args) > 2 else None,
        words=list(args[3:]),
    )


def parse_response(args: tuple[str, ...], file_path: str | None = None) -> ResponseDirective:
    if not args:
        raise DirectiveError("@response needs a status", file_path)
    return ResponseDirective(
        status=args[0],
        type_token=args[1] if len(args) > 1 else None,
        words=list(args[2:]),
    )


def _media_types(block: str, tag: str) -> list[str]:
    directives = tags.get_directives(block, tag) or []
    return [media_type for args in directives for media_type in args]


def parse_operation(block: str, file_path: str | None = None) -> OperationBlock:
    """Parse a non-ignored operation block."""
    routers = tags.get_directives(block, tags.ROUTER)
    if not routers:
        raise DirectiveError("operation block has no @router directive", file_path)

    requests = tags.get_directives(block, tags.REQUEST) or []
    responses = tags.get_directives(block, tags.RESPONSE) or []

    return OperationBlock(
        block=block,
        router=parse_router(routers[0], file_path),
        summary=tags.directive_words(block, tags.SUMMARY),
        description=tags.directive_words(block, tags.DESCRIPTION),
        requests=[parse_request(args, file_path) for args in requests],
        responses=[parse_response(args, file_path) for args in responses],
        consumes=_media_types(block, tags.CONSUME),
        produces=_media_types(block, tags.PRODUCE),
        deprecated=tags.has_directive(block, tags.DEPRECATED),
    )
