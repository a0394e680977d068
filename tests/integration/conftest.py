import os
from collections.abc import Generator
from typing import Any

import psycopg
import pytest
from pydantic import ValidationError

from resolution_worker.config.settings import Settings
from resolution_worker.database.connection import close_pool, get_connection, init_pool

CREATE_TABLE = """
CREATE TABLE IF NOT EXISTS expedientes (
    id SERIAL PRIMARY KEY,
    codigo_expediente VARCHAR(50) NOT NULL UNIQUE,
    tipo_resolucion VARCHAR(50) NOT NULL,
    url_pdf TEXT,
    fecha_procesamiento TIMESTAMPTZ NOT NULL,
    created_at TIMESTAMPTZ NOT NULL DEFAULT NOW(),
    updated_at TIMESTAMPTZ
)
"""

# Every code written by integration tests uses this year so cleanup is a prefix match.
TEST_CODE_PREFIX = "2001/C022/"


def _test_settings() -> Settings:
    os.environ.setdefault("DB_DATABASE", "resolutions_test")
    os.environ.setdefault("LISTING_URL", "https://sede.example.gob.es/convocatorias/kit-digital")
    return Settings()


@pytest.fixture(scope="session")
def test_settings() -> Settings:
    try:
        return _test_settings()
    except ValidationError as e:
        pytest.skip(f"Integration settings incomplete: {e}. Set DB_USERNAME and DB_PASSWORD")


@pytest.fixture(scope="session")
def integration_pool(test_settings: Settings) -> Generator[None, None, None]:
    try:
        init_pool(test_settings)
        with get_connection() as conn:
            conn.execute(CREATE_TABLE)
            conn.commit()
    except psycopg.Error as e:
        close_pool()
        pytest.skip(f"PostgreSQL test DB not available: {e}. Set DB_* env")
    try:
        yield
    finally:
        close_pool()


@pytest.fixture
def db_conn(integration_pool: None) -> Generator[psycopg.Connection[Any], None, None]:
    with get_connection() as conn:
        yield conn


@pytest.fixture(autouse=True)
def integration_cleanup(integration_pool: None) -> Generator[None, None, None]:
    yield
    with get_connection() as conn:
        conn.execute(
            "DELETE FROM expedientes WHERE codigo_expediente LIKE %s",
            (TEST_CODE_PREFIX + "%",),
        )
        conn.commit()
