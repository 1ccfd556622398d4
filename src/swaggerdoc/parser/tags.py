"""Directive extraction from raw documentation blocks.

A block is the text of one doc comment or docstring. Directive lines start
with ``@name`` followed by whitespace separated arguments, e.g.::

    @router get /api/ledgers/{id}
    @request path integer id* ledger id

Comment decoration (``/**``, ``*/``, leading ``*``) is ignored.
"""

import re

_DECORATION = re.compile(r"^\s*(/\*\*+|\*/|\*(?!/))?\s*")
_CLOSING = re.compile(r"\s*\*+/\s*$")

# Directive vocabulary
CONTROLLER = "controller"
ROUTER = "router"
REQUEST = "request"
RESPONSE = "response"
SUMMARY = "summary"
DESCRIPTION = "description"
IGNORE = "ignore"
DEPRECATED = "deprecated"
CONSUME = "consume"
PRODUCE = "produce"


def clean_block(block: str) -> list[str]:
    """Split a block into lines with comment decoration removed."""
    lines = []
    for raw in block.splitlines():
        line = _CLOSING.sub("", raw)
        line = _DECORATION.sub("", line, count=1)
        lines.append(line.rstrip())
    return lines


def _split_directive(line: str) -> tuple[str, list[str]] | None:
    tokens = line.split()
    if not tokens or not tokens[0].startswith("@") or len(tokens[0]) == 1:
        return None
    return tokens[0][1:], tokens[1:]


def get_directives(
    block: str, tag: str, case_sensitive: bool = False
) -> list[tuple[str, ...]] | None:
    """Return the argument tuples of every ``@tag`` line in the block.

    Returns None when the block has no such directive. A directive without
    arguments yields an empty tuple.
    """
    found = []
    for line in clean_block(block):
        parsed = _split_directive(line)
        if parsed is None:
            continue
        name, args = parsed
        if name == tag or (not case_sensitive and name.lower() == tag.lower()):
            found.append(tuple(args))
    return found or None


def has_directive(block: str, tag: str, case_sensitive: bool = False) -> bool:
    return get_directives(block, tag, case_sensitive) is not None


def directive_words(block: str, tag: str) -> str:
    """All arguments of every ``@tag`` line, space joined."""
    directives = get_directives(block, tag) or []
    return " ".join(word for args in directives for word in args)
