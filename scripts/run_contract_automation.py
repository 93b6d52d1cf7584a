"""Run the contract automation once (renewals, expirations, billing).

Same flow as ``POST /api/cron/process-contracts``, for a system crontab:

    python scripts/run_contract_automation.py [YYYY-MM-DD]
"""

from __future__ import annotations

import importlib
import json
import sys

from dotenv import load_dotenv

from config import get_settings_module
from finstrava.common.datetime_utils import parse_iso_date
from finstrava.container import build_container
from finstrava.cron.controller import run_payload
from finstrava.logging_config import setup_logging


def main(argv: list[str]) -> int:
    load_dotenv(override=False)
    settings = importlib.import_module(get_settings_module())
    setup_logging(getattr(settings, "LOG_LEVEL", "INFO"))

    day = parse_iso_date(argv[0]) if argv else None
    container = build_container(db_config=settings.DB_CONFIG)
    run = container.contract_automation_service.run_scheduled(day)

    print(json.dumps(run_payload(run), ensure_ascii=False, indent=2))
    return 0 if run.success else 1


if __name__ == "__main__":
    sys.exit(main(sys.argv[1:]))
