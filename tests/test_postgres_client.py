import pytest
from sqlalchemy import create_engine

from storage.postgres_client import get_engine, normalize_database_url, verify_connection
from utils.errors import ConnectivityError


def test_normalize_database_url():
    assert normalize_database_url("postgres://u:p@h/db") == "postgresql+psycopg://u:p@h/db"
    assert normalize_database_url("postgresql://u:p@h/db") == "postgresql+psycopg://u:p@h/db"
    assert normalize_database_url("sqlite://") == "sqlite://"


def test_get_engine_requires_url():
    with pytest.raises(ConnectivityError):
        get_engine("")


def test_verify_connection_ok():
    verify_connection(get_engine("sqlite://"))


def test_verify_connection_failure_is_connectivity_error(tmp_path):
    engine = create_engine(f"sqlite:///{tmp_path}/missing/dir/db.sqlite")
    with pytest.raises(ConnectivityError):
        verify_connection(engine)
