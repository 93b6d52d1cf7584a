"""Dump the finstrava database (schema, data and routines) to ``backups/``.

    python scripts/backup.py [OUTPUT_DIR]

Needs ``mysqldump`` from the MySQL client tools on PATH.
"""

from __future__ import annotations

import importlib
import logging
import os
import subprocess
import sys
from datetime import datetime
from pathlib import Path
from typing import Mapping, Optional

from dotenv import load_dotenv

from config import get_settings_module
from finstrava.logging_config import setup_logging

logger = logging.getLogger("finstrava.backup")

DEFAULT_DIR = Path(__file__).resolve().parents[1] / "backups"


def dump_command(db: Mapping) -> list[str]:
    # password goes through MYSQL_PWD so it stays out of the process list
    return [
        "mysqldump",
        "--host", str(db["host"]),
        "--port", str(db.get("port", 3306)),
        "--user", str(db["user"]),
        "--routines",
        "--single-transaction",
        str(db["database"]),
    ]


def backup_file(out_dir: Path, database: str, when: Optional[datetime] = None) -> Path:
    stamp = (when or datetime.now()).strftime("%Y%m%d_%H%M%S")
    return out_dir / f"{database}_{stamp}.sql"


def run_backup(db: Mapping, out_dir: Path = DEFAULT_DIR) -> Path:
    """Write the dump and return its path; a failed dump leaves no file behind."""
    out_dir.mkdir(parents=True, exist_ok=True)
    target = backup_file(out_dir, str(db["database"]))
    env = {**os.environ, "MYSQL_PWD": str(db.get("password") or "")}

    try:
        with target.open("wb") as fh:
            subprocess.run(dump_command(db), stdout=fh, stderr=subprocess.PIPE, env=env, check=True)
    except FileNotFoundError:
        target.unlink(missing_ok=True)
        raise SystemExit("mysqldump not found. Install the MySQL client tools.")
    except subprocess.CalledProcessError as e:
        target.unlink(missing_ok=True)
        detail = (e.stderr or b"").decode("utf-8", errors="replace").strip()
        raise SystemExit(f"mysqldump failed (exit {e.returncode}): {detail or 'no output'}")

    logger.info("Backup written to %s (%d bytes)", target, target.stat().st_size)
    return target


def main(argv: list[str]) -> int:
    load_dotenv(override=False)
    settings = importlib.import_module(get_settings_module())
    setup_logging(getattr(settings, "LOG_LEVEL", "INFO"))

    out_dir = Path(argv[0]) if argv else DEFAULT_DIR
    print(run_backup(settings.DB_CONFIG, out_dir))
    return 0


if __name__ == "__main__":
    sys.exit(main(sys.argv[1:]))
