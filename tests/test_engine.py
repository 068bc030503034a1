"""Tests for engine initialization and session_scope (ledger_kernel/db/engine.py)."""

from datetime import date
from uuid import uuid4

import pytest

from ledger_kernel.db import engine as engine_module
from ledger_kernel.db.engine import (
    create_tables,
    get_engine,
    get_session,
    init_engine_from_url,
    session_scope,
)
from ledger_kernel.models.fiscal_year import FiscalYear
from ledger_kernel.services.account_service import FiscalYearService


@pytest.fixture
def file_engine(tmp_path, monkeypatch):
    """Module-level engine on a throwaway SQLite file; globals restored afterwards."""
    monkeypatch.setattr(engine_module, "_engine", None)
    monkeypatch.setattr(engine_module, "_SessionFactory", None)
    eng = init_engine_from_url(f"sqlite:///{tmp_path / 'ledger.db'}")
    create_tables(eng)
    yield eng
    eng.dispose()


def _create_year(session, clock):
    return FiscalYearService(session, clock).create_fiscal_year(
        uuid4(), "2024", date(2024, 1, 1), date(2024, 12, 31), uuid4()
    )


class TestUninitialized:
    def test_get_engine_requires_init(self, monkeypatch):
        monkeypatch.setattr(engine_module, "_engine", None)
        with pytest.raises(RuntimeError):
            get_engine()

    def test_get_session_requires_init(self, monkeypatch):
        monkeypatch.setattr(engine_module, "_SessionFactory", None)
        with pytest.raises(RuntimeError):
            get_session()


class TestSessionScope:
    def test_commits_on_success(self, file_engine, deterministic_clock):
        with session_scope() as session:
            year = _create_year(session, deterministic_clock)

        with get_session() as session:
            assert session.get(FiscalYear, year.id) is not None

    def test_rolls_back_on_error(self, file_engine, deterministic_clock):
        created = []
        with pytest.raises(RuntimeError, match="abort"):
            with session_scope() as session:
                created.append(_create_year(session, deterministic_clock))
                raise RuntimeError("abort")

        with get_session() as session:
            assert session.get(FiscalYear, created[0].id) is None

    def test_engine_is_module_engine(self, file_engine):
        assert get_engine() is file_engine
        assert file_engine.dialect.name == "sqlite"
