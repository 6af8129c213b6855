"""
User records test suite

Runs entirely in-process: the PostgreSQL store is replaced by an in-memory
fake for service and route tests, and by a fake asyncpg connection for the
SQL layer tests.
"""
