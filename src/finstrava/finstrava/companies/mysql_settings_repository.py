from __future__ import annotations

from decimal import Decimal
from typing import Any, Mapping, Optional, Sequence

from ..common.datetime_utils import db_timestamp
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, insert_row, update_row
from .model import CancellationReason, CompanySettings
from .repository import SettingsRepository

_SETTINGS_FIELDS = ("default_cancellation_fee", "include_pj_in_payroll")


class MySQLSettingsRepository(SettingsRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_settings(self, company_id: str) -> Optional[CompanySettings]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT id, company_id, default_cancellation_fee, include_pj_in_payroll
                FROM company_settings
                WHERE company_id=%s
                """,
                (company_id,),
            )
            r = fetchone(cur)
            if not r:
                return None
            return CompanySettings(
                id=str(r["id"]),
                company_id=str(r["company_id"]),
                default_cancellation_fee=Decimal(r.get("default_cancellation_fee") or 0),
                include_pj_in_payroll=bool(r.get("include_pj_in_payroll")),
            )

    def upsert_settings(self, company_id: str, data: Mapping[str, Any]) -> None:
        fields = {k: v for k, v in data.items() if k in _SETTINGS_FIELDS}
        fields["updated_at"] = db_timestamp()
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT id FROM company_settings WHERE company_id=%s", (company_id,))
            existing = fetchone(cur)
            if existing:
                update_row(cur, "company_settings", str(existing["id"]), fields)
            else:
                insert_row(cur, "company_settings", {"company_id": company_id, **fields})

    def list_cancellation_reasons(self, company_id: str) -> Sequence[CancellationReason]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT id, company_id, name, description, requires_details, is_active, display_order
                FROM cancellation_reasons
                WHERE company_id=%s
                ORDER BY display_order ASC
                """,
                (company_id,),
            )
            return [
                CancellationReason(
                    id=str(r["id"]),
                    company_id=str(r["company_id"]),
                    name=r["name"],
                    description=r.get("description"),
                    requires_details=bool(r.get("requires_details")),
                    is_active=bool(r.get("is_active", True)),
                    display_order=int(r.get("display_order") or 0),
                )
                for r in fetchall(cur)
            ]

    def create_cancellation_reason(self, company_id: str, data: Mapping[str, Any]) -> str:
        with db_cursor(self._conn_factory) as (_, cur):
            return insert_row(cur, "cancellation_reasons", {**data, "company_id": company_id})

    def update_cancellation_reason(self, company_id: str, reason_id: str, data: Mapping[str, Any]) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            return update_row(
                cur,
                "cancellation_reasons",
                reason_id,
                {**data, "updated_at": db_timestamp()},
                company_id=company_id,
            )

    def delete_cancellation_reason(self, company_id: str, reason_id: str) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "DELETE FROM cancellation_reasons WHERE id=%s AND company_id=%s",
                (reason_id, company_id),
            )
            return cur.rowcount > 0
