"""Request middleware: the protocol and the compiled-assets mount."""

from lectern.middleware.protocol import Middleware, Next
from lectern.middleware.static import StaticFiles

__all__ = ["Middleware", "Next", "StaticFiles"]
