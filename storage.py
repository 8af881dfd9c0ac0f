import json
import sqlite3
from contextlib import contextmanager
from typing import Any, Iterator

from config import settings


def db_path() -> str:
    return settings.SESSION_DB_PATH


@contextmanager
def get_connection() -> Iterator[sqlite3.Connection]:
    """
    Conexión al archivo de sesiones. Confirma al salir sin error y siempre
    cierra, así ninguna escritura de sesión o tema queda a medias.
    """
    conn = sqlite3.connect(db_path())
    try:
        conn.row_factory = sqlite3.Row
        yield conn
        conn.commit()
    finally:
        conn.close()


def init_db() -> None:
    """
    Crea la tabla clave/valor donde se guardan sesión y preferencias.
    Es idempotente.
    """
    with get_connection() as conn:
        conn.execute(
            """
            CREATE TABLE IF NOT EXISTS kv_store (
                key TEXT PRIMARY KEY,
                value TEXT NOT NULL
            )
            """
        )


def put_value(key: str, value: Any) -> None:
    """
    Guarda (o reemplaza) un valor serializable a JSON.
    """
    with get_connection() as conn:
        conn.execute(
            "INSERT OR REPLACE INTO kv_store (key, value) VALUES (?, ?)",
            (key, json.dumps(value)),
        )


def get_value(key: str, default: Any = None) -> Any:
    """
    Devuelve el valor guardado o `default` si no existe.
    """
    with get_connection() as conn:
        cur = conn.cursor()
        cur.execute("SELECT value FROM kv_store WHERE key = ?", (key,))
        row = cur.fetchone()
    if row is None:
        return default
    return json.loads(row["value"])


def delete_value(key: str) -> None:
    with get_connection() as conn:
        conn.execute("DELETE FROM kv_store WHERE key = ?", (key,))

