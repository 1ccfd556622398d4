"""Resolution of type tokens into OpenAPI schema fragments.

Token grammar::

    boolean | integer | number | string   -> {"type": token}
    <SchemaName>                          -> {"$ref": "#/components/schemas/<SchemaName>"}
    array<T>                              -> {"type": "array", "items": resolve(T)}
"""

from collections.abc import Container

from swaggerdoc.errors import MissingSchemaError

SCALAR_TYPES = ("boolean", "integer", "number", "string")
SCHEMA_REF_PREFIX = "#/components/schemas/"


def is_scalar(token: str) -> bool:
    return token in SCALAR_TYPES


def is_array_token(token: str) -> bool:
    return token.startswith("array<") and token.endswith(">")


def array_item_token(token: str) -> str:
    """``array<Foo>`` -> ``Foo``"""
    return token[len("array<"):-1]


def schema_ref(name: str) -> dict:
    return {"$ref": SCHEMA_REF_PREFIX + name}


def resolve_schema(
    token: str,
    schema_names: Container[str],
    method: str,
    route: str,
    kind: str = "request",
) -> dict:
    """Turn a type token into a schema, failing on undefined schema names.

    ``method`` and ``route`` only serve the error message.
    """
    if is_scalar(token):
        return {"type": token}

    if is_array_token(token):
        items = resolve_schema(array_item_token(token), schema_names, method, route, kind)
        return {"type": "array", "items": items}

    if not token or token not in schema_names:
        raise MissingSchemaError(method, route, token, kind)
    return schema_ref(token)
