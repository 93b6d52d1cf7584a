from __future__ import annotations

from enum import Enum


class ContractStatus(str, Enum):
    """Ciclo de vida do contrato."""

    DRAFT = "draft"
    ACTIVE = "active"
    PAUSED = "paused"
    CANCELLED = "cancelled"
    EXPIRED = "expired"


class BillingType(str, Enum):
    """Periodicidade de cobrança do contrato."""

    MONTHLY = "monthly"
    QUARTERLY = "quarterly"
    SEMIANNUAL = "semiannual"
    ANNUAL = "annual"


class EntryType(str, Enum):
    INCOME = "income"
    EXPENSE = "expense"


class EntryStatus(str, Enum):
    """Situação de um lançamento financeiro."""

    PENDING = "pending"
    PAID = "paid"
    OVERDUE = "overdue"
    CANCELLED = "cancelled"


class RecurringType(str, Enum):
    WEEKLY = "weekly"
    MONTHLY = "monthly"
    BIMONTHLY = "bimonthly"
    QUARTERLY = "quarterly"
    SEMIANNUAL = "semiannual"
    ANNUAL = "annual"


class CustomerStatus(str, Enum):
    LEAD = "lead"
    ACTIVE = "active"
    CHURNED = "churned"


class CategoryType(str, Enum):
    INCOME = "income"
    EXPENSE = "expense"


class ProductType(str, Enum):
    PRODUCT = "product"
    SERVICE = "service"


class EmployeeStatus(str, Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"
    VACATION = "vacation"
    LEAVE = "leave"
    TERMINATED = "terminated"


class EmploymentType(str, Enum):
    """Regime de contratação do funcionário."""

    CLT = "clt"
    PJ = "pj"
    INTERN = "intern"
    TEMPORARY = "temporary"
    FREELANCER = "freelancer"


class PayrollStatus(str, Enum):
    DRAFT = "draft"
    CALCULATED = "calculated"
    APPROVED = "approved"
    PAID = "paid"
    CANCELLED = "cancelled"


class PayrollItemStatus(str, Enum):
    PENDING = "pending"
    PAID = "paid"
    CANCELLED = "cancelled"
