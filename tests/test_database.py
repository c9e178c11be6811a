"""
Tests for the positional-parameter database client and error propagation.
"""

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import text
from sqlalchemy.exc import OperationalError

from app.core.database import DatabaseClient, get_db
from main import app


class TestDatabaseClient:
    """Tests for DatabaseClient.execute"""

    def test_binds_positional_parameters(self, db_session, seeded_jobs):
        client = DatabaseClient(db_session)

        rows = client.execute("SELECT title FROM jobs WHERE salary >= $1 AND salary < $2 ORDER BY title", [150, 300])

        assert rows == [{"title": "Job2"}]

    def test_parameter_reused(self, db_session):
        client = DatabaseClient(db_session)

        rows = client.execute("SELECT $1 AS a, $1 AS b, $2 AS c", ["x", "y"])

        assert rows == [{"a": "x", "b": "x", "c": "y"}]

    def test_rows_keep_aliases(self, db_session, seeded_jobs):
        client = DatabaseClient(db_session)

        rows = client.execute('SELECT num_employees AS "numEmployees" FROM companies WHERE handle = $1', ["c2"])

        assert rows == [{"numEmployees": 2}]

    def test_statement_without_rows(self, db_session, seeded_jobs):
        client = DatabaseClient(db_session)

        assert client.execute("DELETE FROM jobs WHERE id = $1", [seeded_jobs[0]]) == []
        assert client.execute("SELECT id FROM jobs WHERE id = $1", [seeded_jobs[0]]) == []

    def test_values_are_not_interpolated(self, db_session, seeded_jobs):
        client = DatabaseClient(db_session)

        rows = client.execute("SELECT id FROM jobs WHERE title = $1", ["Job1' OR '1'='1"])

        assert rows == []

    def test_database_errors_propagate(self, db_session):
        client = DatabaseClient(db_session)

        with pytest.raises(OperationalError):
            client.execute("SELECT * FROM no_such_table")

        # Session is usable again after the failed statement
        assert client.execute("SELECT 1 AS one") == [{"one": 1}]


class TestUnhandledErrors:
    """Database failures surface as 500 responses"""

    def test_missing_table_returns_500(self, db_session, seeded_jobs):
        db_session.execute(text("DROP TABLE jobs"))
        db_session.commit()

        def override_get_db():
            yield db_session

        app.dependency_overrides[get_db] = override_get_db
        try:
            with TestClient(app, raise_server_exceptions=False) as test_client:
                response = test_client.get("/jobs")
        finally:
            app.dependency_overrides.clear()

        assert response.status_code == 500
        assert response.json() == {"detail": "Internal server error"}
