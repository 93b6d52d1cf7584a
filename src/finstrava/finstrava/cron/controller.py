from __future__ import annotations

import hmac
import logging

from flask import Flask, current_app, jsonify, request

from ..common.datetime_utils import now_utc
from ..common.payload import to_primitive
from ..container import Container
from ..contracts.model import AutomationRun

logger = logging.getLogger(__name__)


def _authorized() -> bool:
    secret = current_app.config.get("CRON_SECRET") or ""
    if not secret:
        return True
    header = request.headers.get("Authorization", "")
    return hmac.compare_digest(header.encode("utf-8"), f"Bearer {secret}".encode("utf-8"))


def _iso_now() -> str:
    return now_utc().isoformat().replace("+00:00", "Z")


def run_payload(run: AutomationRun) -> dict:
    return {
        "success": run.success,
        "timestamp": _iso_now(),
        "results": {
            "generatedTransactions": to_primitive(run.generated_transactions),
            "processedRenewals": to_primitive(run.processed_renewals),
            "expiredContracts": to_primitive(run.expired_contracts),
        },
        "summary": {
            "transactionsGenerated": len(run.generated_transactions),
            "contractsRenewed": len(run.processed_renewals),
            "contractsExpired": len(run.expired_contracts),
            "totalProcessed": run.total_processed,
        },
        "errors": list(run.errors),
    }


def register(app: Flask, container: Container) -> None:
    automation = container.contract_automation_service

    def _run():
        try:
            run = automation.run_scheduled()
            return jsonify(run_payload(run)), 200 if run.success else 207
        except Exception as e:
            logger.exception("Contract automation failed")
            return (
                jsonify({"success": False, "timestamp": _iso_now(), "error": str(e) or "Unknown error"}),
                500,
            )

    @app.route("/api/cron/process-contracts", methods=["POST"], endpoint="cron_process_contracts")
    def cron_process_contracts():
        if not _authorized():
            return jsonify({"error": "Unauthorized"}), 401
        return _run()

    @app.route("/api/cron/process-contracts", methods=["GET"], endpoint="cron_process_contracts_health")
    def cron_process_contracts_health():
        if not _authorized():
            return (
                jsonify(
                    {
                        "status": "ok",
                        "message": "Contract automation endpoint is active",
                        "note": "Use POST with authorization to execute",
                    }
                ),
                200,
            )
        return _run()
