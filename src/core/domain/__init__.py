"""Domain models and entities.

Pure data structures (Pydantic v2). The domain knows nothing about HTTP or
the CLI, only about conversions and tasks.
"""
