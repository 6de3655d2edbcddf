"""Content store: files on disk to parsed entries, route tables, shared data.

Usage::

    from lectern.content import build_route_table, load_shared_content

    routes = build_route_table("content")
    shared = load_shared_content("content/_global")
"""

from lectern.content.loader import CONTENT_SUFFIXES, ContentEntry, load_entry
from lectern.content.pipes import DEFAULT_PIPES
from lectern.content.routes import RouteCollision, RouteTable, build_route_table, route_path
from lectern.content.shared import load_shared_content

__all__ = [
    "CONTENT_SUFFIXES",
    "DEFAULT_PIPES",
    "ContentEntry",
    "RouteCollision",
    "RouteTable",
    "build_route_table",
    "load_entry",
    "load_shared_content",
    "route_path",
]
