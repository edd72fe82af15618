"""Database Infrastructure - SQLAlchemy Base shared by every ORM model.

Invariants:
    - Single async engine per process (initialized via init_db)
    - All sessions are async (AsyncSession)

Design Decisions:
    - aiosqlite for local play, asyncpg for hosted PostgreSQL
"""
