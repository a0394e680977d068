from datetime import datetime, timezone
from unittest.mock import MagicMock, patch

import psycopg
import pytest

from resolution_worker.database.models import CaseRecord
from resolution_worker.database.repositories.case_record_repository import CaseRecordRepository
from resolution_worker.processor.exceptions import DuplicateCaseError, PersistenceError

MODULE = "resolution_worker.database.repositories.case_record_repository"
NOW = datetime(2025, 3, 1, 12, 0, tzinfo=timezone.utc)


def _make_record() -> CaseRecord:
    return CaseRecord(
        code="2024/C022/00000123",
        resolution_type="concesion",
        source_url="https://sede.example.gob.es/obtenerBinarioDocumento/abc",
        processed_at=NOW,
    )


def _make_row() -> dict:
    return {
        "codigo_expediente": "2024/C022/00000123",
        "tipo_resolucion": "concesion",
        "url_pdf": "https://sede.example.gob.es/obtenerBinarioDocumento/abc",
        "fecha_procesamiento": NOW,
        "created_at": NOW,
        "updated_at": None,
    }


def _mock_connection(mock_get_conn: MagicMock) -> tuple[MagicMock, MagicMock]:
    """Wire up a mock connection + cursor and return (mock_conn, mock_cursor)."""
    mock_cursor = MagicMock()
    mock_conn = MagicMock()
    mock_conn.cursor.return_value.__enter__ = MagicMock(return_value=mock_cursor)
    mock_conn.cursor.return_value.__exit__ = MagicMock(return_value=False)
    mock_get_conn.return_value.__enter__ = MagicMock(return_value=mock_conn)
    mock_get_conn.return_value.__exit__ = MagicMock(return_value=False)
    return mock_conn, mock_cursor


class TestFindByCode:
    @patch(f"{MODULE}.get_connection")
    def test_returns_case_record_when_found(self, mock_get_conn: MagicMock) -> None:
        _conn, mock_cursor = _mock_connection(mock_get_conn)
        mock_cursor.fetchone.return_value = _make_row()

        result = CaseRecordRepository().find_by_code("2024/C022/00000123")

        assert result == CaseRecord(
            code="2024/C022/00000123",
            resolution_type="concesion",
            source_url="https://sede.example.gob.es/obtenerBinarioDocumento/abc",
            processed_at=NOW,
            created_at=NOW,
        )
        sql, params = mock_cursor.execute.call_args.args
        assert "FROM expedientes" in sql
        assert params == ("2024/C022/00000123",)

    @patch(f"{MODULE}.get_connection")
    def test_returns_none_when_missing(self, mock_get_conn: MagicMock) -> None:
        _conn, mock_cursor = _mock_connection(mock_get_conn)
        mock_cursor.fetchone.return_value = None

        assert CaseRecordRepository().find_by_code("2024/C022/00000999") is None

    @patch(f"{MODULE}.get_connection")
    def test_wraps_database_errors(self, mock_get_conn: MagicMock) -> None:
        _conn, mock_cursor = _mock_connection(mock_get_conn)
        mock_cursor.execute.side_effect = psycopg.OperationalError("server closed")

        with pytest.raises(PersistenceError, match="server closed"):
            CaseRecordRepository().find_by_code("2024/C022/00000123")


class TestInsert:
    @patch(f"{MODULE}.get_connection")
    def test_executes_insert_and_commits(self, mock_get_conn: MagicMock) -> None:
        mock_conn, mock_cursor = _mock_connection(mock_get_conn)
        record = _make_record()

        CaseRecordRepository().insert(record)

        sql, params = mock_cursor.execute.call_args.args
        assert "INSERT INTO expedientes" in sql
        assert params == (record.code, "concesion", record.source_url, NOW)
        mock_conn.commit.assert_called_once()

    @patch(f"{MODULE}.get_connection")
    def test_raises_duplicate_on_unique_violation(self, mock_get_conn: MagicMock) -> None:
        mock_conn, mock_cursor = _mock_connection(mock_get_conn)
        mock_cursor.execute.side_effect = psycopg.errors.UniqueViolation("duplicate key")

        with pytest.raises(DuplicateCaseError):
            CaseRecordRepository().insert(_make_record())
        mock_conn.commit.assert_not_called()

    @patch(f"{MODULE}.get_connection")
    def test_wraps_other_database_errors(self, mock_get_conn: MagicMock) -> None:
        _conn, mock_cursor = _mock_connection(mock_get_conn)
        mock_cursor.execute.side_effect = psycopg.OperationalError("timeout")

        with pytest.raises(PersistenceError) as exc_info:
            CaseRecordRepository().insert(_make_record())
        assert not isinstance(exc_info.value, DuplicateCaseError)


class TestUpdate:
    @patch(f"{MODULE}.get_connection")
    def test_executes_update_and_commits(self, mock_get_conn: MagicMock) -> None:
        mock_conn, mock_cursor = _mock_connection(mock_get_conn)
        mock_cursor.rowcount = 1
        record = _make_record()

        CaseRecordRepository().update(record)

        sql, params = mock_cursor.execute.call_args.args
        assert "UPDATE expedientes" in sql
        assert "tipo_resolucion" in sql
        assert params == ("concesion", record.source_url, NOW, record.code)
        mock_conn.commit.assert_called_once()

    @patch(f"{MODULE}.get_connection")
    def test_raises_when_no_rows_updated(self, mock_get_conn: MagicMock) -> None:
        mock_conn, mock_cursor = _mock_connection(mock_get_conn)
        mock_cursor.rowcount = 0

        with pytest.raises(PersistenceError, match="not found"):
            CaseRecordRepository().update(_make_record())
        mock_conn.commit.assert_not_called()


class TestCheckConnection:
    @patch(f"{MODULE}.get_connection")
    def test_returns_true_when_table_reachable(self, mock_get_conn: MagicMock) -> None:
        mock_conn, _cursor = _mock_connection(mock_get_conn)

        assert CaseRecordRepository().check_connection() is True
        mock_conn.execute.assert_called_once()

    @patch(f"{MODULE}.get_connection")
    def test_returns_false_on_database_error(self, mock_get_conn: MagicMock) -> None:
        mock_conn, _cursor = _mock_connection(mock_get_conn)
        mock_conn.execute.side_effect = psycopg.OperationalError("refused")

        assert CaseRecordRepository().check_connection() is False

    @patch(f"{MODULE}.get_connection")
    def test_returns_false_when_pool_missing(self, mock_get_conn: MagicMock) -> None:
        mock_get_conn.side_effect = RuntimeError("Connection pool not initialized")

        assert CaseRecordRepository().check_connection() is False
