"""sqlite storage for saved calculations."""

import json
import logging
import sqlite3
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Union

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]


class StorageError(RuntimeError):
    """The calculation store could not be read or written."""


class CalculationNotFound(LookupError):
    def __init__(self, calculation_id: int):
        super().__init__(f"calculation {calculation_id} not found")
        self.calculation_id = calculation_id


def _connect(db_path: PathLike) -> sqlite3.Connection:
    conn = sqlite3.connect(db_path)
    conn.row_factory = sqlite3.Row
    return conn


def _row_to_record(row: sqlite3.Row) -> Dict[str, Any]:
    return {
        "id": row["id"],
        "kind": row["kind"],
        "parameters": json.loads(row["parameters"]),
        "results": json.loads(row["results"]),
        "created_at": row["created_at"],
    }


def init_db(db_path: PathLike) -> None:
    try:
        conn = _connect(db_path)
    except sqlite3.Error as e:
        raise StorageError(f"cannot open calculation store: {e}") from e
    try:
        conn.execute(
            """
            create table if not exists calculations (
                id integer primary key autoincrement,
                kind text not null,
                parameters text not null,
                results text not null,
                created_at text not null
            )
            """
        )
        conn.commit()
    except sqlite3.Error as e:
        raise StorageError(f"cannot initialise calculation store: {e}") from e
    finally:
        conn.close()
    logger.debug("Calculation store ready at %s", db_path)


def save_calculation(
    db_path: PathLike,
    kind: str,
    parameters: Dict[str, Any],
    results: Dict[str, Any],
) -> Dict[str, Any]:
    """Insert a calculation and return it with its assigned id and timestamp."""
    created_at = datetime.now(timezone.utc).isoformat(timespec="seconds")
    try:
        conn = _connect(db_path)
        try:
            cursor = conn.execute(
                """
                insert into calculations (kind, parameters, results, created_at)
                values (?, ?, ?, ?)
                """,
                (kind, json.dumps(parameters), json.dumps(results), created_at),
            )
            conn.commit()
            calculation_id = cursor.lastrowid
        finally:
            conn.close()
    except sqlite3.Error as e:
        raise StorageError(f"cannot save calculation: {e}") from e

    logger.info("Saved %s calculation %s", kind, calculation_id)
    return {
        "id": calculation_id,
        "kind": kind,
        "parameters": parameters,
        "results": results,
        "created_at": created_at,
    }


def list_calculations(db_path: PathLike) -> List[Dict[str, Any]]:
    """All saved calculations, newest first."""
    try:
        conn = _connect(db_path)
        try:
            rows = conn.execute(
                """
                select id, kind, parameters, results, created_at
                from calculations
                order by id desc
                """
            ).fetchall()
        finally:
            conn.close()
    except sqlite3.Error as e:
        raise StorageError(f"cannot list calculations: {e}") from e
    return [_row_to_record(row) for row in rows]


def get_calculation(db_path: PathLike, calculation_id: int) -> Dict[str, Any]:
    try:
        conn = _connect(db_path)
        try:
            row = conn.execute(
                """
                select id, kind, parameters, results, created_at
                from calculations
                where id = ?
                """,
                (calculation_id,),
            ).fetchone()
        finally:
            conn.close()
    except sqlite3.Error as e:
        raise StorageError(f"cannot load calculation {calculation_id}: {e}") from e
    if row is None:
        raise CalculationNotFound(calculation_id)
    return _row_to_record(row)
