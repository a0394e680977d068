import psycopg
from psycopg.rows import dict_row

from resolution_worker.database.connection import get_connection
from resolution_worker.database.models import CaseRecord
from resolution_worker.logging.logger import Log
from resolution_worker.processor.exceptions import DuplicateCaseError, PersistenceError


class CaseRecordRepository:
    """Database operations for the expedientes table.

    Each method runs on its own pooled connection and commits on its own, so a
    failure never leaves a partially written case behind.
    """

    def find_by_code(self, code: str) -> CaseRecord | None:
        """Look up a case by its code. Returns None when it does not exist.

        Raises:
            PersistenceError: if the query fails.
        """
        try:
            with get_connection() as conn:
                with conn.cursor(row_factory=dict_row) as cur:
                    cur.execute(
                        """
                        SELECT codigo_expediente, tipo_resolucion, url_pdf,
                               fecha_procesamiento, created_at, updated_at
                        FROM expedientes
                        WHERE codigo_expediente = %s
                        """,
                        (code,),
                    )
                    row = cur.fetchone()
        except psycopg.Error as exc:
            raise PersistenceError(f"Lookup of case {code} failed: {exc}") from exc

        if row is None:
            return None

        return CaseRecord(
            code=row["codigo_expediente"],
            resolution_type=row["tipo_resolucion"],
            source_url=row["url_pdf"],
            processed_at=row["fecha_procesamiento"],
            created_at=row["created_at"],
            updated_at=row["updated_at"],
        )

    def insert(self, record: CaseRecord) -> None:
        """Insert a new case.

        Raises:
            DuplicateCaseError: if a case with the same code already exists.
            PersistenceError: if the insert fails for any other reason.
        """
        try:
            with get_connection() as conn:
                with conn.cursor() as cur:
                    cur.execute(
                        """
                        INSERT INTO expedientes
                        (codigo_expediente, tipo_resolucion, url_pdf, fecha_procesamiento)
                        VALUES (%s, %s, %s, %s)
                        """,
                        (
                            record.code,
                            record.resolution_type,
                            record.source_url,
                            record.processed_at,
                        ),
                    )
                conn.commit()
        except psycopg.errors.UniqueViolation as exc:
            raise DuplicateCaseError(f"Case {record.code} already exists") from exc
        except psycopg.Error as exc:
            raise PersistenceError(f"Insert of case {record.code} failed: {exc}") from exc

    def update(self, record: CaseRecord) -> None:
        """Overwrite resolution type, source URL and processing time of a case.

        Raises:
            PersistenceError: if the update fails or the case no longer exists.
        """
        try:
            with get_connection() as conn:
                with conn.cursor() as cur:
                    cur.execute(
                        """
                        UPDATE expedientes
                        SET tipo_resolucion = %s,
                            url_pdf = %s,
                            fecha_procesamiento = %s,
                            updated_at = NOW()
                        WHERE codigo_expediente = %s
                        """,
                        (
                            record.resolution_type,
                            record.source_url,
                            record.processed_at,
                            record.code,
                        ),
                    )
                    if cur.rowcount == 0:
                        raise PersistenceError(f"Case {record.code} not found for update")
                conn.commit()
        except psycopg.Error as exc:
            raise PersistenceError(f"Update of case {record.code} failed: {exc}") from exc

    def check_connection(self) -> bool:
        """Return True when the expedientes table is reachable."""
        try:
            with get_connection() as conn:
                conn.execute("SELECT 1 FROM expedientes LIMIT 1")
        except (psycopg.Error, RuntimeError) as exc:
            Log.error(f"Store connection check failed: {exc}")
            return False
        Log.info("Store connection established")
        return True
