"""
Core utilities shared across the todo API.

This package hosts:
- configuration helpers (port, backing file path)
- logging setup for the server process
- small time helpers used to stamp items

Services and routers depend on these primitives instead of reading os.environ
or formatting timestamps themselves.
"""
