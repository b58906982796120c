"""Domain models and entities.

Why:
- Pure data structures and lifecycle state live here.
- The domain knows nothing about HTTP, JSON, or the CLI.
"""
