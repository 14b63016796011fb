"""Endpoint routers of the HTTP API."""
