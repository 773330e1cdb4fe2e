"""SQLite persistence for finished candidate reports."""

import json
import logging
import sqlite3
import uuid
from contextlib import contextmanager
from datetime import datetime, timezone
from threading import Lock

from models.schemas.report import DetailedAnalysisReport

logger = logging.getLogger(__name__)


class ReportStore:
    """Stores reports as JSON rows keyed by a random hex id.

    One connection is shared behind a lock so that ``:memory:`` databases
    survive across calls.
    """

    def __init__(self, db_path: str = ":memory:"):
        self.db_path = db_path
        self._lock = Lock()
        self._conn = sqlite3.connect(db_path, check_same_thread=False)
        self._conn.row_factory = sqlite3.Row
        self.init_database()
        logger.info("Report store ready at %s", db_path)

    @contextmanager
    def get_connection(self):
        with self._lock:
            yield self._conn
            self._conn.commit()

    def init_database(self) -> None:
        with self.get_connection() as conn:
            conn.execute(
                """
                CREATE TABLE IF NOT EXISTS reports (
                    id TEXT PRIMARY KEY,
                    candidate_name TEXT,
                    overall_score INTEGER,
                    report TEXT NOT NULL,
                    created_at TEXT NOT NULL
                )
                """
            )

    def save(self, report: DetailedAnalysisReport, candidate_name: str = "") -> str:
        report_id = uuid.uuid4().hex
        with self.get_connection() as conn:
            conn.execute(
                "INSERT INTO reports (id, candidate_name, overall_score, report, created_at) VALUES (?, ?, ?, ?, ?)",
                (
                    report_id,
                    candidate_name,
                    report.overall_score,
                    report.model_dump_json(),
                    datetime.now(timezone.utc).isoformat(),
                ),
            )
        return report_id

    def get(self, report_id: str) -> dict | None:
        with self.get_connection() as conn:
            row = conn.execute("SELECT report FROM reports WHERE id = ?", (report_id,)).fetchone()
        if row is None:
            return None
        return json.loads(row["report"])

    def close(self) -> None:
        self._conn.close()
