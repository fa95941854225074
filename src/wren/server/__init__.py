"""ASGI server integration: request handling, response sending, error pages."""
