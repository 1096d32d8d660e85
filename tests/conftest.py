"""Shared test fixtures.

Provides a fake asyncpg pool and connection so routing and query handlers
can be exercised without a database. The fake connection records every
statement and answers from a queue of scripted results.
"""

import os
os.environ.setdefault("LOOTBOX_DB_URL", "postgresql://test@localhost:5432/lootbox_test")
os.environ["LOOTBOX_API_KEYS"] = "test-key, second-key"  # Must be set before settings load

from collections import deque
from contextlib import asynccontextmanager

import pytest
from fastapi.testclient import TestClient

import database
from api import app

API_KEY = "test-key"

class FakeConnection:
    """Stands in for asyncpg.Connection."""

    DEFAULTS = {
        'fetch': [],
        'fetchrow': None,
        'fetchval': None,
        'execute': 'OK',
    }

    def __init__(self):
        self.calls = []
        self.results = deque()

    def queue(self, *results):
        """Script results for the next calls, in order. Exceptions are raised."""
        self.results.extend(results)
        return self

    async def _answer(self, method, sql, args):
        self.calls.append((method, sql, args))
        if self.results:
            result = self.results.popleft()
            if isinstance(result, Exception):
                raise result
            return result
        return self.DEFAULTS[method]

    async def fetch(self, sql, *args):
        return await self._answer('fetch', sql, args)

    async def fetchrow(self, sql, *args):
        return await self._answer('fetchrow', sql, args)

    async def fetchval(self, sql, *args):
        return await self._answer('fetchval', sql, args)

    async def execute(self, sql, *args):
        return await self._answer('execute', sql, args)

    @property
    def statements(self):
        return [sql for _, sql, _ in self.calls]

class FakePool:
    """Stands in for asyncpg.Pool, counting acquisitions and releases."""

    def __init__(self, conn):
        self.conn = conn
        self.acquired = 0
        self.released = 0

    @asynccontextmanager
    async def acquire(self):
        self.acquired += 1
        try:
            yield self.conn
        finally:
            self.released += 1

@pytest.fixture
def conn():
    """A fresh fake connection."""
    return FakeConnection()

@pytest.fixture
def pool(conn, monkeypatch):
    """Install a fake pool as the process-wide pool."""
    fake = FakePool(conn)
    monkeypatch.setattr(database, "_pool", fake)
    return fake

@pytest.fixture
def client(pool):
    """TestClient bound to the fake pool."""
    return TestClient(app)

@pytest.fixture
def auth_headers():
    """Headers carrying a valid API key."""
    return {"x-api-key": API_KEY}
