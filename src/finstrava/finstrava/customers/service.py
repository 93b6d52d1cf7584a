from __future__ import annotations

from typing import Any, Mapping, Optional, Sequence

from ..common import document as documents
from ..common.payload import clean_payload
from ..common.validators import optional_enum, require_non_empty
from ..core.enums import CustomerStatus
from ..core.exceptions import NotFoundError, ValidationError
from .model import CompanyCustomerKPIs, Customer, CustomerWithKPIs
from .repository import CustomerRepository

_FIELDS = (
    "name",
    "email",
    "phone",
    "document",
    "document_type",
    "address",
    "city",
    "state",
    "zip_code",
    "notes",
    "is_active",
)


def _checked_document(document: Any, document_type: Optional[str]) -> dict:
    """Validate the check digits and store the document in its usual punctuation."""
    document = str(document)
    document_type = document_type or documents.detect_document_type(document)
    if document_type is None:
        raise ValidationError("Documento deve ter 11 (CPF) ou 14 (CNPJ) dígitos")
    if not documents.validate_document(document, document_type):
        raise ValidationError("CPF inválido" if document_type == documents.CPF else "CNPJ inválido")
    return {
        "document": documents.format_document(document, document_type),
        "document_type": document_type,
    }


class CustomerService:
    """Use case: customer registry of a company (soft delete only)."""

    def __init__(self, customers: CustomerRepository):
        self._customers = customers

    def _validated(self, data: Mapping[str, Any], *, partial: bool) -> dict:
        fields = clean_payload(data, allowed=_FIELDS)
        if not partial or "name" in data:
            fields["name"] = require_non_empty(data.get("name"), "Nome do cliente")
        document_type = fields.get("document_type")
        if document_type is not None and document_type not in documents.DOCUMENT_TYPES:
            raise ValidationError("Tipo de documento inválido")
        if "document" in fields:
            fields.update(_checked_document(fields["document"], document_type))
        return fields

    def list(self, company_id: str) -> Sequence[Customer]:
        return self._customers.list_for_company(company_id)

    def get(self, company_id: str, customer_id: str) -> Customer:
        customer = self._customers.get_by_id(company_id, customer_id)
        if not customer:
            raise NotFoundError("Cliente não encontrado")
        return customer

    def create(self, company_id: str, data: Mapping[str, Any]) -> str:
        return self._customers.create(company_id, self._validated(data, partial=False))

    def update(self, company_id: str, customer_id: str, data: Mapping[str, Any]) -> None:
        if not self._customers.update(company_id, customer_id, self._validated(data, partial=True)):
            raise NotFoundError("Cliente não encontrado")

    def delete(self, company_id: str, customer_id: str) -> None:
        if not self._customers.soft_delete(company_id, customer_id):
            raise NotFoundError("Cliente não encontrado")

    def company_kpis(self, company_id: str) -> Optional[CompanyCustomerKPIs]:
        return self._customers.company_kpis(company_id)

    def customers_with_kpis(self, company_id: str, status: Optional[str] = None) -> Sequence[CustomerWithKPIs]:
        return self._customers.customers_with_kpis(
            company_id, optional_enum(status, CustomerStatus, "Status do cliente")
        )
