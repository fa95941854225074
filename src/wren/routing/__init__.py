"""Routing: route-rule parsing and first-match path rewriting.

Rules are parsed once at startup into an immutable ``RouteTable`` and
applied per request by ``RouteEngine``.
"""
