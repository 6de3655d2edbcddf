"""ASGI request handling, error responses, and the pounce runner."""
