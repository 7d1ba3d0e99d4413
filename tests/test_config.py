from __future__ import annotations

import sys
from pathlib import Path

import pytest

# Garante que o pacote cleanmaster seja importável durante os testes locais
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from cleanmaster.app_factory import build_storage, create_services  # noqa: E402
from cleanmaster.core import config as core_config  # noqa: E402
from cleanmaster.db import session as db_session  # noqa: E402
from cleanmaster.repositories.storage import JSONFileStorage, SQLStorage  # noqa: E402


@pytest.fixture()
def clean_env(monkeypatch):
    for name in (
        "CLEANMASTER_DATA_FILE",
        "DATABASE_URL",
        "CLEANMASTER_REFERENCE_POLICY",
        "LOG_LEVEL",
        "LOG_FILE",
    ):
        monkeypatch.delenv(name, raising=False)
    core_config.get_settings.cache_clear()
    yield monkeypatch
    core_config.get_settings.cache_clear()


def test_defaults(clean_env):
    settings = core_config.get_settings()
    assert settings.data_file == core_config.DEFAULT_DATA_FILE
    assert settings.database_url == ""
    assert settings.reference_policy == "keep"
    assert settings.log_level == "INFO"


def test_environment_overrides(clean_env, tmp_path):
    clean_env.setenv("CLEANMASTER_DATA_FILE", str(tmp_path / "records.json"))
    clean_env.setenv("CLEANMASTER_REFERENCE_POLICY", " Cascade ")
    clean_env.setenv("LOG_LEVEL", "debug")
    settings = core_config.get_settings()
    assert settings.data_file == tmp_path / "records.json"
    assert settings.reference_policy == "cascade"
    assert settings.log_level == "DEBUG"


def test_unknown_policy_falls_back_to_keep(clean_env):
    clean_env.setenv("CLEANMASTER_REFERENCE_POLICY", "orphan-everything")
    assert core_config.get_settings().reference_policy == "keep"


def test_json_backend_from_environment(clean_env, tmp_path):
    data_file = tmp_path / "records.json"
    clean_env.setenv("CLEANMASTER_DATA_FILE", str(data_file))
    services = create_services()
    services.customers.create("Alice")

    assert isinstance(services.store.storage, JSONFileStorage)
    assert data_file.exists()
    assert create_services().store.customers.items == services.store.customers.items


def test_sql_backend_selected_by_database_url(clean_env, tmp_path):
    clean_env.setenv("DATABASE_URL", f"sqlite:///{tmp_path / 'records.db'}")
    db_session.get_engine.cache_clear()
    try:
        storage = build_storage(core_config.get_settings())
        assert isinstance(storage, SQLStorage)
        storage.engine.dispose()
    finally:
        db_session.get_engine.cache_clear()
        db_session._get_sessionmaker.cache_clear()  # type: ignore[attr-defined]
