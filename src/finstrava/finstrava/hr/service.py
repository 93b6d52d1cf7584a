from __future__ import annotations

from decimal import Decimal
from typing import Any, Mapping, Optional, Sequence

from ..common import document as documents
from ..common import tree as hierarchy
from ..common.datetime_utils import optional_date
from ..common.payload import blank_to_none, clean_payload
from ..common.tree import TreeNode, TreePath
from ..common.validators import optional_enum, require_enum, require_money, require_non_empty, require_range
from ..core.constants import DEFAULT_PAYMENT_DAY, DEFAULT_WORK_HOURS
from ..core.enums import EmployeeStatus, EmploymentType
from ..core.exceptions import NotFoundError, ValidationError
from .model import Department, Employee, Position
from .repository import DepartmentRepository, EmployeeRepository, PositionRepository

_DEPARTMENT_FIELDS = (
    "name",
    "code",
    "parent_id",
    "description",
    "cost_center_code",
    "budget_monthly",
    "manager_id",
    "is_active",
    "sort_order",
)
_POSITION_FIELDS = ("name", "department_id", "description", "salary_range_min", "salary_range_max", "is_active")
_EMPLOYEE_FIELDS = (
    "name",
    "department_id",
    "position_id",
    "cpf",
    "rg",
    "birth_date",
    "gender",
    "marital_status",
    "email",
    "phone",
    "emergency_contact_name",
    "emergency_contact_phone",
    "address",
    "address_number",
    "address_complement",
    "neighborhood",
    "city",
    "state",
    "zip_code",
    "bank_name",
    "bank_code",
    "bank_agency",
    "bank_account",
    "bank_account_type",
    "pix_key",
    "pix_key_type",
    "employee_code",
    "hire_date",
    "termination_date",
    "base_salary",
    "contract_type",
    "work_hours",
    "payment_day",
    "default_category_id",
    "default_payment_method_id",
    "default_bank_account_id",
    "status",
    "notes",
)
_EMPLOYEE_FKS = (
    "department_id",
    "position_id",
    "default_category_id",
    "default_payment_method_id",
    "default_bank_account_id",
)
_NOT_ON_PAYROLL = {EmploymentType.PJ, EmploymentType.FREELANCER}


class DepartmentService:
    """Use case: the department hierarchy of a company."""

    def __init__(self, departments: DepartmentRepository):
        self._departments = departments

    def list(self, company_id: str) -> Sequence[Department]:
        return self._departments.list_for_company(company_id)

    def get(self, company_id: str, department_id: str) -> Department:
        department = self._departments.get_by_id(company_id, department_id)
        if not department:
            raise NotFoundError("Departamento não encontrado")
        return department

    def create(self, company_id: str, data: Mapping[str, Any]) -> str:
        fields = clean_payload(data, allowed=_DEPARTMENT_FIELDS)
        fields["name"] = require_non_empty(data.get("name"), "Nome do departamento")
        fields["is_active"] = bool(data.get("is_active", True))
        fields["parent_id"] = data.get("parent_id") or None
        if "budget_monthly" in fields:
            fields["budget_monthly"] = require_money(fields["budget_monthly"], "Orçamento mensal")
        return self._departments.create(company_id, fields)

    def update(self, company_id: str, department_id: str, data: Mapping[str, Any]) -> None:
        fields = blank_to_none(data, allowed=_DEPARTMENT_FIELDS)
        if "name" in fields:
            fields["name"] = require_non_empty(fields["name"], "Nome do departamento")
        if "parent_id" in fields:
            fields["parent_id"] = fields["parent_id"] or None
            if not self.can_be_parent(company_id, department_id, fields["parent_id"]):
                raise ValidationError("Departamento pai inválido")
        if fields.get("budget_monthly") is not None:
            fields["budget_monthly"] = require_money(fields["budget_monthly"], "Orçamento mensal")
        if not self._departments.update(company_id, department_id, fields):
            raise NotFoundError("Departamento não encontrado")

    def delete(self, company_id: str, department_id: str) -> None:
        if not self._departments.soft_delete(company_id, department_id):
            raise NotFoundError("Departamento não encontrado")

    def tree(self, company_id: str) -> list[TreeNode[Department]]:
        return hierarchy.build_tree(self.list(company_id))

    def flat(self, company_id: str) -> list[TreePath[Department]]:
        return hierarchy.flatten(self.list(company_id))

    def roots(self, company_id: str) -> list[Department]:
        return hierarchy.roots(self.list(company_id))

    def children(self, company_id: str, parent_id: str) -> list[Department]:
        return hierarchy.children_of(self.list(company_id), parent_id)

    def active(self, company_id: str) -> list[Department]:
        return hierarchy.active(self.list(company_id))

    def can_be_parent(self, company_id: str, department_id: str, candidate_id: Optional[str]) -> bool:
        return hierarchy.can_be_parent(self.list(company_id), department_id, candidate_id)


class PositionService:
    def __init__(self, positions: PositionRepository):
        self._positions = positions

    def _money_fields(self, fields: dict) -> dict:
        for key, label in (("salary_range_min", "Salário mínimo"), ("salary_range_max", "Salário máximo")):
            if fields.get(key) is not None:
                fields[key] = require_money(fields[key], label)
        low, high = fields.get("salary_range_min"), fields.get("salary_range_max")
        if low is not None and high is not None and low > high:
            raise ValidationError("Faixa salarial inválida")
        return fields

    def list(self, company_id: str) -> Sequence[Position]:
        return self._positions.list_for_company(company_id)

    def get(self, company_id: str, position_id: str) -> Position:
        position = self._positions.get_by_id(company_id, position_id)
        if not position:
            raise NotFoundError("Cargo não encontrado")
        return position

    def create(self, company_id: str, data: Mapping[str, Any]) -> str:
        fields = clean_payload(data, allowed=_POSITION_FIELDS)
        fields["name"] = require_non_empty(data.get("name"), "Nome do cargo")
        fields["is_active"] = bool(data.get("is_active", True))
        fields["department_id"] = data.get("department_id") or None
        return self._positions.create(company_id, self._money_fields(fields))

    def update(self, company_id: str, position_id: str, data: Mapping[str, Any]) -> None:
        fields = blank_to_none(data, allowed=_POSITION_FIELDS)
        if "name" in fields:
            fields["name"] = require_non_empty(fields["name"], "Nome do cargo")
        if "department_id" in fields:
            fields["department_id"] = fields["department_id"] or None
        if not self._positions.update(company_id, position_id, self._money_fields(fields)):
            raise NotFoundError("Cargo não encontrado")

    def delete(self, company_id: str, position_id: str) -> None:
        if not self._positions.soft_delete(company_id, position_id):
            raise NotFoundError("Cargo não encontrado")

    def by_department(self, company_id: str, department_id: str) -> list[Position]:
        return [p for p in self.list(company_id) if p.department_id == department_id and p.is_active]

    def active(self, company_id: str) -> list[Position]:
        return [p for p in self.list(company_id) if p.is_active]


class EmployeeService:
    """Use case: employee registry feeding the payroll."""

    def __init__(self, employees: EmployeeRepository):
        self._employees = employees

    def _typed(self, fields: dict) -> dict:
        if fields.get("cpf"):
            if not documents.validate_cpf(str(fields["cpf"])):
                raise ValidationError("CPF inválido")
            fields["cpf"] = documents.format_document(str(fields["cpf"]), documents.CPF)
        if fields.get("base_salary") is not None:
            fields["base_salary"] = require_money(fields["base_salary"], "Salário base")
        if fields.get("contract_type") is not None:
            fields["contract_type"] = require_enum(fields["contract_type"], EmploymentType, "Tipo de contrato")
        if fields.get("status") is not None:
            fields["status"] = require_enum(fields["status"], EmployeeStatus, "Status do funcionário")
        if fields.get("work_hours") is not None:
            fields["work_hours"] = require_range(fields["work_hours"], "Carga horária", 1, 80)
        if fields.get("payment_day") is not None:
            fields["payment_day"] = require_range(fields["payment_day"], "Dia de pagamento", 1, 31)
        for key in ("hire_date", "termination_date", "birth_date"):
            if fields.get(key) is not None:
                fields[key] = optional_date(fields[key])
        return fields

    def list(self, company_id: str) -> Sequence[Employee]:
        return self._employees.list_for_company(company_id)

    def get(self, company_id: str, employee_id: str) -> Employee:
        employee = self._employees.get_by_id(company_id, employee_id)
        if not employee:
            raise NotFoundError("Funcionário não encontrado")
        return employee

    def create(self, company_id: str, data: Mapping[str, Any]) -> str:
        fields = clean_payload(data, allowed=_EMPLOYEE_FIELDS)
        fields["name"] = require_non_empty(data.get("name"), "Nome do funcionário")
        if fields.get("hire_date") is None:
            raise ValidationError("Data de admissão inválida")
        fields["base_salary"] = data.get("base_salary") or 0
        fields.update(
            is_active=True,
            status=optional_enum(data.get("status"), EmployeeStatus, "Status do funcionário")
            or EmployeeStatus.ACTIVE,
            contract_type=optional_enum(data.get("contract_type"), EmploymentType, "Tipo de contrato")
            or EmploymentType.CLT,
            work_hours=data.get("work_hours") or DEFAULT_WORK_HOURS,
            payment_day=data.get("payment_day") or DEFAULT_PAYMENT_DAY,
        )
        for key in _EMPLOYEE_FKS:
            fields[key] = data.get(key) or None
        return self._employees.create(company_id, self._typed(fields))

    def update(self, company_id: str, employee_id: str, data: Mapping[str, Any]) -> None:
        fields = blank_to_none(data, allowed=_EMPLOYEE_FIELDS)
        if "name" in fields:
            fields["name"] = require_non_empty(fields["name"], "Nome do funcionário")
        for key in _EMPLOYEE_FKS:
            if key in fields:
                fields[key] = fields[key] or None
        if not self._employees.update(company_id, employee_id, self._typed(fields)):
            raise NotFoundError("Funcionário não encontrado")

    def delete(self, company_id: str, employee_id: str) -> None:
        if not self._employees.soft_delete(company_id, employee_id):
            raise NotFoundError("Funcionário não encontrado")

    def by_department(self, company_id: str, department_id: str) -> list[Employee]:
        return [e for e in self.active(company_id) if e.department_id == department_id]

    def active(self, company_id: str) -> list[Employee]:
        return [e for e in self.list(company_id) if e.status == EmployeeStatus.ACTIVE]

    def payroll_eligible(self, company_id: str) -> list[Employee]:
        return [e for e in self.active(company_id) if e.contract_type not in _NOT_ON_PAYROLL]

    def total_base_salary(self, company_id: str) -> Decimal:
        return sum((e.base_salary for e in self.active(company_id)), Decimal("0"))
