"""Simple migration runner for SQLite using provided SQL files in migrations/"""
from pathlib import Path
import argparse
import logging
import sqlite3

BASE = Path(__file__).parent
DB_PATH = BASE / "app.db"
MIGRATIONS_DIR = BASE / "migrations"

logger = logging.getLogger("grading_system.migrations")


def run(db_path: Path = DB_PATH, migrations_dir: Path = MIGRATIONS_DIR) -> list:
    """Execute SQL migration files against a SQLite database.

    The function applies every `migrations/*.sql` file in lexical
    order and returns the names of the applied files. The scripts use
    `IF NOT EXISTS` so running them twice is harmless.
    """
    migrations = sorted(Path(migrations_dir).glob("*.sql"))
    logger.info("Using database: %s", db_path)
    applied = []
    conn = sqlite3.connect(db_path)
    try:
        cur = conn.cursor()
        for m in migrations:
            logger.info("Applying: %s", m.name)
            cur.executescript(m.read_text(encoding="utf-8"))
            applied.append(m.name)
        conn.commit()
    finally:
        conn.close()
    logger.info("Migrations applied.")
    return applied


if __name__ == '__main__':
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument('--db', type=Path, default=DB_PATH, help='SQLite database file')
    args = parser.parse_args()
    logging.basicConfig(level=logging.INFO, format="%(message)s")
    run(args.db)
