"""HTTP primitives: immutable Request, Response, Headers, QueryParams."""
