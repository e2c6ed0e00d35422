import os
import uuid
from collections.abc import Generator
from pathlib import Path
from typing import Any

import psycopg
import pytest

from pdfindex.config.settings import Settings
from pdfindex.database.connection import apply_schema, close_pool, get_connection, init_pool


def _test_settings() -> Settings:
    os.environ.setdefault("DB_DATABASE", "pdfindex_test")
    return Settings(ocr_enabled=False)


@pytest.fixture(scope="session")
def test_settings() -> Settings:
    return _test_settings()


@pytest.fixture(scope="session")
def integration_pool(test_settings: Settings) -> Generator[None, None, None]:
    try:
        init_pool(test_settings)
        with get_connection() as conn:
            apply_schema(conn)
    except Exception as e:
        close_pool()
        pytest.skip(f"PostgreSQL test DB not available: {e}. Set DB_* env to run")
    try:
        yield
    finally:
        close_pool()


@pytest.fixture
def db_conn(integration_pool: None) -> Generator[psycopg.Connection[Any], None, None]:
    with get_connection() as conn:
        yield conn


@pytest.fixture
def owner_id() -> str:
    return str(uuid.uuid4())


@pytest.fixture
def seed_assets(
    db_conn: psycopg.Connection[Any],
) -> Generator[list[str], None, None]:
    """Asset IDs inserted by a test; deleted (with cascades) afterwards."""
    created: list[str] = []
    yield created
    if created:
        with db_conn.cursor() as cur:
            cur.execute("DELETE FROM assets WHERE id = ANY(%s::uuid[])", (created,))
        db_conn.commit()


@pytest.fixture
def make_asset(
    db_conn: psycopg.Connection[Any],
    seed_assets: list[str],
    owner_id: str,
):  # type: ignore[no-untyped-def]
    def _make(
        file_name: str = "report.pdf",
        original_path: str | None = None,
        owner: str | None = None,
    ) -> str:
        asset_id = str(uuid.uuid4())
        with db_conn.cursor() as cur:
            cur.execute(
                """
                INSERT INTO assets (id, owner_id, original_path, original_file_name)
                VALUES (%s, %s, %s, %s)
                """,
                (asset_id, owner or owner_id, original_path or file_name, file_name),
            )
        db_conn.commit()
        seed_assets.append(asset_id)
        return asset_id

    return _make


@pytest.fixture
def files_root(tmp_path: Path) -> Path:
    return tmp_path
