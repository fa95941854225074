"""Middleware: the request-resolution stages.

Each stage is ``async (request, next) -> response``. The default stack
built by :func:`wren.pipeline.default_middleware` is::

    AccessLog -> RouteRewrite -> StaticFiles -> fallback error page
"""
