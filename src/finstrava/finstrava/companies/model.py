from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Optional


@dataclass(frozen=True)
class Company:
    """Tenant: every other record is scoped by ``company_id``."""

    id: str
    name: str
    cnpj: Optional[str] = None
    legal_name: Optional[str] = None
    logo_url: Optional[str] = None


@dataclass(frozen=True)
class CompanySettings:
    company_id: str
    default_cancellation_fee: Decimal = Decimal("0")
    include_pj_in_payroll: bool = False
    id: Optional[str] = None


@dataclass(frozen=True)
class CancellationReason:
    id: str
    company_id: str
    name: str
    description: Optional[str] = None
    requires_details: bool = False
    is_active: bool = True
    display_order: int = 0
