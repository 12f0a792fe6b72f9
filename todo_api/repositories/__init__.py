"""
Persistence adapters.

These modules encapsulate how todo items are stored/retrieved (today a single
JSON file). The store service depends on them rather than touching the file.
"""
