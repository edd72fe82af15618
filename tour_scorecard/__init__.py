"""Tour Scorecard - golf skins scoring engine with a FastAPI shell.

Invariants:
    - Package root contains no executable code (import side-effects prohibited)

Design Decisions:
    - Empty __init__.py: explicit imports only, no star exports
"""
