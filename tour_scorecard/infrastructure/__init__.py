"""Infrastructure Layer - external service clients and cross-cutting concerns.

Invariants:
    - Infrastructure imports only value types and errors from core/, never scoring logic
    - All external calls wrapped with retry/timeout/error mapping

Design Decisions:
    - Resilient wrappers over raw clients, one concern per module
"""
