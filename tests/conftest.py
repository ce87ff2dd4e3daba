import pytest

import mysql_adaptor.tools.mysql.connection as connection_module


class FakeCursor:
    def __init__(self, connection):
        self.connection = connection
        self.description = None
        self.rowcount = -1
        self.lastrowid = None
        self.warning_count = 0
        self._rows = []

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        return False

    def execute(self, query, args=None):
        self.connection.executed.append(query)
        if self.connection.error is not None:
            raise self.connection.error
        if self.connection.rows is not None:
            self._rows = self.connection.rows
            first = self._rows[0] if self._rows else {}
            self.description = tuple((name, None, None, None, None, None, None) for name in first)
            self.rowcount = len(self._rows)
        else:
            self.rowcount = self.connection.affected_rows
            self.lastrowid = self.connection.insert_id
            self.warning_count = self.connection.warning_count
        return self.rowcount

    def fetchall(self):
        return self._rows


class FakeConnection:
    """Stands in for a PyMySQL connection and records what the adaptor does with it."""

    def __init__(self, rows=None, error=None, affected_rows=1, insert_id=7, warning_count=0):
        self.rows = rows
        self.error = error
        self.affected_rows = affected_rows
        self.insert_id = insert_id
        self.warning_count = warning_count
        self.executed = []
        self.close_calls = 0

    def cursor(self):
        return FakeCursor(self)

    def close(self):
        self.close_calls += 1


@pytest.fixture
def fake_mysql(monkeypatch):
    """
    Patch the driver connect so every run gets the returned FakeConnection.

    The captured connect kwargs are stored on ``fake.connect_kwargs``.
    """
    fake = FakeConnection()
    fake.connect_kwargs = []

    def fake_connect(config):
        fake.connect_kwargs.append(config.driver_kwargs())
        return fake

    monkeypatch.setattr(connection_module, "_connect_blocking", fake_connect)
    return fake


@pytest.fixture
def configuration():
    return {
        "host": "db.example.test",
        "port": 3306,
        "database": "inventory",
        "user": "loader",
        "password": "secret",
    }
