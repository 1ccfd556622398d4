"""Shared helpers for controllers."""


def paginate(items, page=1):
    """
    @router get /api/never
    """
    return items
