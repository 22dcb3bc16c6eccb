"""Domain models and enums.

Pure data structures (Pydantic v2); the domain knows nothing about HTTP, the
CLI or database drivers.
"""
