from __future__ import annotations

import logging
import time
from datetime import date
from typing import Any, Callable, Optional, Sequence

from ..common.datetime_utils import now_utc, optional_date
from ..core.exceptions import BackendError
from .model import AutomationRun, ExpiredContract, GeneratedTransaction, ProcessedRenewal
from .repository import ContractAutomationRepository

logger = logging.getLogger(__name__)


class ContractAutomationService:
    """Daily contract automation: renewals, then expirations, then billing.

    The three steps are stored procedures keyed by date, so running them twice
    for the same day is harmless.
    """

    def __init__(self, automation: ContractAutomationRepository):
        self._automation = automation

    @staticmethod
    def _day(value: Any) -> date:
        return optional_date(value) or date.today()

    def process_renewals(self, day: Any = None) -> Sequence[ProcessedRenewal]:
        return self._automation.process_renewals(self._day(day))

    def expire_contracts(self, day: Any = None) -> Sequence[ExpiredContract]:
        return self._automation.expire_contracts(self._day(day))

    def generate_transactions(self, day: Any = None) -> Sequence[GeneratedTransaction]:
        return self._automation.generate_transactions(self._day(day))

    def process_all(self, day: Any = None) -> AutomationRun:
        """Manual run from the contracts screen; the first failing step aborts."""
        run_day = self._day(day)
        run = AutomationRun(timestamp=now_utc())
        run.processed_renewals = list(self._automation.process_renewals(run_day))
        run.expired_contracts = list(self._automation.expire_contracts(run_day))
        run.generated_transactions = list(self._automation.generate_transactions(run_day))
        return run

    def run_scheduled(self, day: Optional[date] = None) -> AutomationRun:
        """Cron run: every step is attempted and failures are collected in ``errors``."""
        started = time.perf_counter()
        run_day = day or date.today()
        run = AutomationRun(timestamp=now_utc())

        steps: list[tuple[str, Callable[[date], Sequence[Any]], str]] = [
            ("Renewal", self._automation.process_renewals, "processed_renewals"),
            ("Expiration", self._automation.expire_contracts, "expired_contracts"),
            ("Transaction", self._automation.generate_transactions, "generated_transactions"),
        ]
        for label, step, attr in steps:
            try:
                setattr(run, attr, list(step(run_day) or []))
            except BackendError as e:
                logger.warning("%s step failed: %s", label, e)
                run.errors.append(f"{label} error: {e}")
            except Exception as e:
                logger.exception("%s step raised", label)
                run.errors.append(f"{label} exception: {str(e) or 'Unknown'}")

        run.execution_time_ms = int((time.perf_counter() - started) * 1000)

        try:
            self._automation.record_run(run)
        except Exception:
            # automation_logs may not exist yet
            logger.warning("Could not write automation log", exc_info=True)

        logger.info(
            "Contract automation for %s: renewed=%d expired=%d generated=%d errors=%d (%d ms)",
            run_day.isoformat(),
            len(run.processed_renewals),
            len(run.expired_contracts),
            len(run.generated_transactions),
            len(run.errors),
            run.execution_time_ms,
        )
        return run
