"""Connectivity check against a real PostgreSQL server.

Skipped unless DB_USER and DB_PASSWORD are configured (env or .env).
"""

import psycopg2
import pytest
from decouple import config

from rutz.database import DB_HOST, DB_NAME, DB_PORT, make_engine
from rutz.database_storage import DatabaseStorage

DB_USER = config("DB_USER", default="")
DB_PASSWORD = config("DB_PASSWORD", default="")

pytestmark = pytest.mark.skipif(not (DB_USER and DB_PASSWORD), reason="DB_USER / DB_PASSWORD not set")


def test_postgres_accepts_connection():
    conn = psycopg2.connect(
        user=DB_USER,
        password=DB_PASSWORD,
        host=DB_HOST,
        port=DB_PORT,
        dbname=DB_NAME,
        connect_timeout=5,
    )
    conn.close()


def test_postgres_storage_initializes_and_serves_catalog():
    storage = DatabaseStorage(make_engine())
    storage.initialize()
    assert storage.get_products()
    assert storage.get_inventory("turmeric-extract") is not None
