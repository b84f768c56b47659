"""
API package.

Routers are grouped by version under ``api/<version>/``.
"""
