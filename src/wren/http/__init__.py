"""HTTP primitives: immutable Request, Headers, and Response types."""
