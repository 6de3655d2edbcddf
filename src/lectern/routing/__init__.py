"""Exact-path routing for content routes."""

from lectern.routing.route import Route, RouteMatch
from lectern.routing.router import Router, normalize_path

__all__ = ["Route", "RouteMatch", "Router", "normalize_path"]
