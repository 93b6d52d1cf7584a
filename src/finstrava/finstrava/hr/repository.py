from __future__ import annotations

from typing import Any, Mapping, Optional, Protocol, Sequence

from .model import Department, Employee, Position


class DepartmentRepository(Protocol):
    def list_for_company(self, company_id: str) -> Sequence[Department]:
        """Not deleted, ordered by sort_order then name."""
        raise NotImplementedError

    def get_by_id(self, company_id: str, department_id: str) -> Optional[Department]:
        raise NotImplementedError

    def create(self, company_id: str, data: Mapping[str, Any]) -> str:
        raise NotImplementedError

    def update(self, company_id: str, department_id: str, data: Mapping[str, Any]) -> bool:
        raise NotImplementedError

    def soft_delete(self, company_id: str, department_id: str) -> bool:
        raise NotImplementedError


class PositionRepository(Protocol):
    def list_for_company(self, company_id: str) -> Sequence[Position]:
        raise NotImplementedError

    def get_by_id(self, company_id: str, position_id: str) -> Optional[Position]:
        raise NotImplementedError

    def create(self, company_id: str, data: Mapping[str, Any]) -> str:
        raise NotImplementedError

    def update(self, company_id: str, position_id: str, data: Mapping[str, Any]) -> bool:
        raise NotImplementedError

    def soft_delete(self, company_id: str, position_id: str) -> bool:
        raise NotImplementedError


class EmployeeRepository(Protocol):
    def list_for_company(self, company_id: str) -> Sequence[Employee]:
        raise NotImplementedError

    def get_by_id(self, company_id: str, employee_id: str) -> Optional[Employee]:
        raise NotImplementedError

    def create(self, company_id: str, data: Mapping[str, Any]) -> str:
        raise NotImplementedError

    def update(self, company_id: str, employee_id: str, data: Mapping[str, Any]) -> bool:
        raise NotImplementedError

    def soft_delete(self, company_id: str, employee_id: str) -> bool:
        raise NotImplementedError
