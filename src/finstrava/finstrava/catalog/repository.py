from __future__ import annotations

from typing import Any, Mapping, Optional, Protocol, Sequence

from ..core.enums import CategoryType
from .model import Category, Package, PackageItem, PaymentMethod, Product, ProductCategory


class CategoryRepository(Protocol):
    def list_for_company(self, company_id: str, *, type: Optional[CategoryType] = None) -> Sequence[Category]:
        """All categories (ordered by type, name); with ``type`` only active ones of that type."""
        raise NotImplementedError

    def get_by_id(self, company_id: str, category_id: str) -> Optional[Category]:
        raise NotImplementedError

    def create(self, company_id: str, data: Mapping[str, Any]) -> str:
        raise NotImplementedError

    def update(self, company_id: str, category_id: str, data: Mapping[str, Any]) -> bool:
        raise NotImplementedError

    def soft_delete(self, company_id: str, category_id: str) -> bool:
        raise NotImplementedError


class PaymentMethodRepository(Protocol):
    def list_for_company(self, company_id: str) -> Sequence[PaymentMethod]:
        raise NotImplementedError

    def create(self, company_id: str, data: Mapping[str, Any]) -> str:
        raise NotImplementedError

    def update(self, company_id: str, method_id: str, data: Mapping[str, Any]) -> bool:
        raise NotImplementedError

    def soft_delete(self, company_id: str, method_id: str) -> bool:
        raise NotImplementedError


class ProductCategoryRepository(Protocol):
    def list_for_company(self, company_id: str) -> Sequence[ProductCategory]:
        """Ordered by sort_order, then name."""
        raise NotImplementedError

    def get_by_id(self, company_id: str, category_id: str) -> Optional[ProductCategory]:
        raise NotImplementedError

    def create(self, company_id: str, data: Mapping[str, Any]) -> str:
        raise NotImplementedError

    def update(self, company_id: str, category_id: str, data: Mapping[str, Any]) -> bool:
        raise NotImplementedError

    def soft_delete(self, company_id: str, category_id: str) -> bool:
        raise NotImplementedError


class ProductRepository(Protocol):
    def list_for_company(self, company_id: str) -> Sequence[Product]:
        raise NotImplementedError

    def get_by_id(self, company_id: str, product_id: str) -> Optional[Product]:
        raise NotImplementedError

    def create(self, company_id: str, data: Mapping[str, Any]) -> str:
        raise NotImplementedError

    def update(self, company_id: str, product_id: str, data: Mapping[str, Any]) -> bool:
        raise NotImplementedError

    def soft_delete(self, company_id: str, product_id: str) -> bool:
        raise NotImplementedError


class PackageRepository(Protocol):
    def list_for_company(self, company_id: str) -> Sequence[Package]:
        raise NotImplementedError

    def get_by_id(self, company_id: str, package_id: str) -> Optional[Package]:
        raise NotImplementedError

    def create(self, company_id: str, data: Mapping[str, Any], items: Sequence[PackageItem]) -> str:
        raise NotImplementedError

    def update(
        self,
        company_id: str,
        package_id: str,
        data: Mapping[str, Any],
        items: Optional[Sequence[PackageItem]] = None,
    ) -> bool:
        """Update fields; when ``items`` is given the item set is replaced entirely."""
        raise NotImplementedError

    def soft_delete(self, company_id: str, package_id: str) -> bool:
        raise NotImplementedError
