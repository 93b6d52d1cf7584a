from __future__ import annotations

from typing import Any, Mapping, Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import call_procedure, db_cursor, fetchall, fetchone, update_row
from .model import Company
from .repository import CompanyRepository


def _row_to_company(r: dict) -> Company:
    return Company(
        id=str(r["id"]),
        name=r["name"],
        cnpj=r.get("cnpj"),
        legal_name=r.get("legal_name"),
        logo_url=r.get("logo_url"),
    )


class MySQLCompanyRepository(CompanyRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_for_user(self, user_id: str) -> Sequence[Company]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT c.id, c.name, c.cnpj, c.legal_name, c.logo_url
                FROM user_companies uc
                JOIN companies c ON c.id = uc.company_id
                WHERE uc.user_id=%s AND uc.is_active=1
                ORDER BY c.name
                """,
                (user_id,),
            )
            return [_row_to_company(r) for r in fetchall(cur)]

    def get_by_id(self, company_id: str) -> Optional[Company]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT id, name, cnpj, legal_name, logo_url FROM companies WHERE id=%s",
                (company_id,),
            )
            row = fetchone(cur)
            return _row_to_company(row) if row else None

    def update(self, company_id: str, data: Mapping[str, Any]) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            return update_row(cur, "companies", company_id, data)

    def create_with_admin(
        self,
        *,
        user_id: str,
        name: str,
        cnpj: Optional[str],
        legal_name: Optional[str],
    ) -> Optional[str]:
        rows = call_procedure(
            self._conn_factory,
            "create_company_with_admin",
            (name, cnpj, legal_name, user_id),
        )
        if not rows:
            return None
        first = rows[0]
        value = first.get("id", next(iter(first.values()), None))
        return str(value) if value is not None else None
