"""Core interfaces/abstractions.

Structural contracts (Protocol) implemented by concrete adapters, so the core
depends on abstractions rather than on the HTTP client.
"""
