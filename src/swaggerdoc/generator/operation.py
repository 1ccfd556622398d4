"""Builds OpenAPI operation objects from parsed operation blocks."""

import copy
import logging
from collections.abc import Container

from swaggerdoc.config import SwaggerDocConfig
from swaggerdoc.generator.schema import is_array_token, is_scalar, resolve_schema
from swaggerdoc.parser.directives import OperationBlock, RequestDirective

logger = logging.getLogger(__name__)

EXAMPLE_PREFIX = "eg:"
ENUM_PREFIX = "enum:"
REQUIRED_MARKER = "*"
API_PREFIX = "/api/"


def operation_id(method: str, path: str) -> str:
    """Derive a stable operationId from the HTTP method and route.

    >>> operation_id("get", "/api/ledgers/{id}")
    'getLedgersById'
    """
    if path.startswith(API_PREFIX):
        path = path[len(API_PREFIX):]
    path = path.rstrip("/")

    parts = []
    for segment in path.split("/"):
        if segment.startswith("{") and segment.endswith("}"):
            parts.append("ById")
        else:
            parts.append(segment[:1].upper() + segment[1:])
    return method.lower() + "".join(parts)


def build_operation(
    op: OperationBlock,
    tag: str,
    schema_names: Container[str],
    config: SwaggerDocConfig,
) -> dict:
    method, route = op.router.method, op.router.path

    operation = {
        "tags": [tag],
        "summary": op.summary,
        "description": op.description,
        "operationId": operation_id(method, route),
    }

    bodies = [r for r in op.requests if r.is_body]
    if bodies:
        if len(bodies) > 1:
            logger.warning("%s:%s declares %d request bodies, only the first is used", method, route, len(bodies))
        media_types = op.consumes or config.consumes
        operation["requestBody"] = build_request_body(bodies[0], media_types, schema_names, method, route)

    located = [r for r in op.requests if not r.is_body]
    if located:
        operation["parameters"] = [
            build_parameter(request, schema_names, method, route) for request in located
        ]

    operation["security"] = build_security(op, config)
    operation["responses"] = build_responses(op, schema_names, op.produces or config.produces)
    operation["deprecated"] = op.deprecated
    return operation


def _split_words(words: list[str]) -> tuple[str | None, list[str] | None, str]:
    """Separate ``eg:`` and ``enum:`` words from description words."""
    example = None
    enum = None
    description = []
    for word in words:
        if word.startswith(EXAMPLE_PREFIX):
            example = word[len(EXAMPLE_PREFIX):]
        elif word.startswith(ENUM_PREFIX):
            enum = word[len(ENUM_PREFIX):].split(",")
        else:
            description.append(word)
    return example, enum, " ".join(description)


def build_request_body(
    request: RequestDirective,
    media_types: list[str],
    schema_names: Container[str],
    method: str,
    route: str,
) -> dict:
    schema = resolve_schema(request.type_token, schema_names, method, route)
    example, enum, description = _split_words(request.words)
    is_array = is_array_token(request.type_token)
    if enum is not None:
        target = schema["items"] if is_array else schema
        target["enum"] = enum
    if example is not None and is_array:
        schema["items"]["example"] = example

    content = {}
    for media_type in media_types:
        media = {"schema": copy.deepcopy(schema)}
        if example is not None and not is_array:
            media["example"] = example
        content[media_type] = media

    return {"description": description, "required": True, "content": content}


def _located_schema(request: RequestDirective, schema_names: Container[str], method: str, route: str) -> dict:
    token = request.type_token
    if is_scalar(token) or is_array_token(token) or token in schema_names:
        return resolve_schema(token, schema_names, method, route)
    logger.warning(
        "%s:%s %s parameter type %r is not a declared schema, using it as a plain type",
        method,
        route,
        request.location,
        token,
    )
    return {"type": token}


def build_parameter(
    request: RequestDirective,
    schema_names: Container[str],
    method: str,
    route: str,
) -> dict:
    """A query/path/header/cookie parameter."""
    parameter = {"in": request.location}
    if request.name_token:
        parameter["name"] = request.name_token.rstrip(REQUIRED_MARKER)
        parameter["required"] = request.name_token.endswith(REQUIRED_MARKER) or request.location == "path"
    else:
        logger.warning("%s:%s has a %s parameter without a name", method, route, request.location)
        parameter["required"] = request.location == "path"

    schema = _located_schema(request, schema_names, method, route)
    if is_array_token(request.type_token):
        if request.location == "query":
            # multi-value: ?tag=a&tag=b
            parameter["style"] = "form"
            parameter["explode"] = True
        target = schema["items"]
    else:
        target = schema

    example, enum, description = _split_words(request.words)
    if enum is not None:
        target["enum"] = enum
    if example is not None:
        if target is schema:
            parameter["example"] = example
        else:
            target["example"] = example

    parameter["description"] = description
    parameter["schema"] = schema
    return parameter


def build_responses(op: OperationBlock, schema_names: Container[str], media_types: list[str]) -> dict:
    if not op.responses:
        return {"default": {"description": "successful operation"}}

    method, route = op.router.method, op.router.path
    responses = {}
    for response in op.responses:
        entry = {"description": " ".join(response.words)}
        if response.type_token:
            schema = resolve_schema(response.type_token, schema_names, method, route, kind="response")
            entry["content"] = {mt: {"schema": copy.deepcopy(schema)} for mt in media_types}
        responses[response.status] = entry
    return responses


def _oauth2_scopes(scheme: dict) -> list[str]:
    scopes = dict(scheme.get("scopes", {}))
    for flow in scheme.get("flows", {}).values():
        scopes.update(flow.get("scopes", {}))
    return list(scopes)


def build_security(op: OperationBlock, config: SwaggerDocConfig) -> list[dict]:
    requirements = []
    for name in config.security_names():
        if not op.has_directive(name):
            continue
        scheme = config.security_schemes[name]
        scheme_type = scheme.get("type")
        if scheme_type == "apiKey":
            value = [copy.deepcopy(scheme)]
        elif scheme_type == "oauth2":
            value = _oauth2_scopes(scheme)
        else:
            value = []
        requirements.append({name: value})
    return requirements


def contract_name(op: OperationBlock, schema_names: Container[str]) -> str | None:
    """Name of the schema the request body is declared with, if any."""
    for request in op.requests:
        if request.is_body and not is_scalar(request.type_token) and request.type_token in schema_names:
            return request.type_token
    return None
