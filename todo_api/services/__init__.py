"""
High-level use cases for the todo API.

The store service orchestrates the JSON repository and the domain rules;
routers (FastAPI endpoints) call it instead of touching the file directly.
"""
