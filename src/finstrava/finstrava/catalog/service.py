from __future__ import annotations

from typing import Any, Iterable, Mapping, Optional, Sequence

from ..common import tree as hierarchy
from ..common.payload import clean_payload
from ..common.tree import TreeNode, TreePath
from ..common.validators import optional_enum, require_enum, require_money, require_non_empty, require_range
from ..core.enums import CategoryType, ProductType
from ..core.exceptions import NotFoundError, ValidationError
from .model import Category, Package, PackageItem, PaymentMethod, Product, ProductCategory
from .repository import (
    CategoryRepository,
    PackageRepository,
    PaymentMethodRepository,
    ProductCategoryRepository,
    ProductRepository,
)

_CATEGORY_FIELDS = ("name", "type", "parent_id", "description", "is_active")
_METHOD_FIELDS = ("name", "is_active", "allows_installments", "max_installments")
_PRODUCT_FIELDS = ("name", "type", "category_id", "description", "price", "unit", "is_recurring", "is_active")
_PRODUCT_CATEGORY_FIELDS = ("name", "parent_id", "description", "color", "icon", "sort_order", "is_active")
_PACKAGE_FIELDS = ("name", "description", "monthly_price", "is_active", "notes")


class CategoryService:
    """Income/expense categories used to classify financial entries."""

    def __init__(self, categories: CategoryRepository):
        self._categories = categories

    def list(self, company_id: str) -> Sequence[Category]:
        return self._categories.list_for_company(company_id)

    def list_by_type(self, company_id: str, type: str) -> Sequence[Category]:
        return self._categories.list_for_company(
            company_id, type=require_enum(type, CategoryType, "Tipo de categoria")
        )

    def get(self, company_id: str, category_id: str) -> Category:
        category = self._categories.get_by_id(company_id, category_id)
        if not category:
            raise NotFoundError("Categoria não encontrada")
        return category

    def create(self, company_id: str, data: Mapping[str, Any]) -> str:
        fields = clean_payload(data, allowed=_CATEGORY_FIELDS)
        fields["name"] = require_non_empty(data.get("name"), "Nome da categoria")
        fields["type"] = require_enum(data.get("type"), CategoryType, "Tipo de categoria")
        fields["is_active"] = bool(data.get("is_active", True))
        return self._categories.create(company_id, fields)

    def update(self, company_id: str, category_id: str, data: Mapping[str, Any]) -> None:
        fields = clean_payload(data, allowed=_CATEGORY_FIELDS)
        if "name" in data:
            fields["name"] = require_non_empty(data.get("name"), "Nome da categoria")
        if "type" in fields:
            fields["type"] = require_enum(fields["type"], CategoryType, "Tipo de categoria")
        if not self._categories.update(company_id, category_id, fields):
            raise NotFoundError("Categoria não encontrada")

    def delete(self, company_id: str, category_id: str) -> None:
        if not self._categories.soft_delete(company_id, category_id):
            raise NotFoundError("Categoria não encontrada")


class PaymentMethodService:
    def __init__(self, methods: PaymentMethodRepository):
        self._methods = methods

    def _validated(self, data: Mapping[str, Any], *, partial: bool) -> dict:
        fields = clean_payload(data, allowed=_METHOD_FIELDS)
        if not partial or "name" in data:
            fields["name"] = require_non_empty(data.get("name"), "Nome da forma de pagamento")
        if "max_installments" in fields:
            fields["max_installments"] = require_range(fields["max_installments"], "Parcelas", 1, 120)
        return fields

    def list(self, company_id: str) -> Sequence[PaymentMethod]:
        return self._methods.list_for_company(company_id)

    def active(self, company_id: str) -> list[PaymentMethod]:
        return [m for m in self.list(company_id) if m.is_active]

    def create(self, company_id: str, data: Mapping[str, Any]) -> str:
        fields = self._validated(data, partial=False)
        fields.setdefault("is_active", True)
        return self._methods.create(company_id, fields)

    def update(self, company_id: str, method_id: str, data: Mapping[str, Any]) -> None:
        if not self._methods.update(company_id, method_id, self._validated(data, partial=True)):
            raise NotFoundError("Forma de pagamento não encontrada")

    def delete(self, company_id: str, method_id: str) -> None:
        if not self._methods.soft_delete(company_id, method_id):
            raise NotFoundError("Forma de pagamento não encontrada")


class ProductCategoryService:
    """Hierarchical categories that group products in the catalog."""

    def __init__(self, categories: ProductCategoryRepository):
        self._categories = categories

    def _validated(self, data: Mapping[str, Any], *, partial: bool) -> dict:
        fields = clean_payload(data, allowed=_PRODUCT_CATEGORY_FIELDS)
        if not partial or "name" in data:
            fields["name"] = require_non_empty(data.get("name"), "Nome da categoria")
        if not partial or "parent_id" in data:
            fields["parent_id"] = data.get("parent_id") or None
        if "sort_order" in fields:
            fields["sort_order"] = require_range(fields["sort_order"], "Ordem", 0, 10_000)
        return fields

    def list(self, company_id: str) -> Sequence[ProductCategory]:
        return self._categories.list_for_company(company_id)

    def get(self, company_id: str, category_id: str) -> ProductCategory:
        category = self._categories.get_by_id(company_id, category_id)
        if not category:
            raise NotFoundError("Categoria de produto não encontrada")
        return category

    def create(self, company_id: str, data: Mapping[str, Any]) -> str:
        fields = self._validated(data, partial=False)
        fields["is_active"] = bool(data.get("is_active", True))
        return self._categories.create(company_id, fields)

    def update(self, company_id: str, category_id: str, data: Mapping[str, Any]) -> None:
        fields = self._validated(data, partial=True)
        if "parent_id" in fields and not self.can_be_parent(company_id, category_id, fields["parent_id"]):
            raise ValidationError("Categoria pai inválida")
        if not self._categories.update(company_id, category_id, fields):
            raise NotFoundError("Categoria de produto não encontrada")

    def delete(self, company_id: str, category_id: str) -> None:
        if not self._categories.soft_delete(company_id, category_id):
            raise NotFoundError("Categoria de produto não encontrada")

    def tree(self, company_id: str) -> list[TreeNode[ProductCategory]]:
        return hierarchy.build_tree(self.list(company_id))

    def flat(self, company_id: str) -> list[TreePath[ProductCategory]]:
        return hierarchy.flatten(self.list(company_id))

    def roots(self, company_id: str) -> list[ProductCategory]:
        return hierarchy.roots(self.list(company_id))

    def children(self, company_id: str, parent_id: str) -> list[ProductCategory]:
        return hierarchy.children_of(self.list(company_id), parent_id)

    def active(self, company_id: str) -> list[ProductCategory]:
        return hierarchy.active(self.list(company_id))

    def can_be_parent(self, company_id: str, category_id: str, candidate_id: Optional[str]) -> bool:
        return hierarchy.can_be_parent(self.list(company_id), category_id, candidate_id)


class ProductService:
    def __init__(self, products: ProductRepository):
        self._products = products

    def _validated(self, data: Mapping[str, Any], *, partial: bool) -> dict:
        fields = clean_payload(data, allowed=_PRODUCT_FIELDS)
        if not partial or "name" in data:
            fields["name"] = require_non_empty(data.get("name"), "Nome do produto")
        if not partial:
            fields["type"] = require_enum(data.get("type", ProductType.SERVICE.value), ProductType, "Tipo de produto")
        elif "type" in fields:
            fields["type"] = require_enum(fields["type"], ProductType, "Tipo de produto")
        if "price" in fields:
            fields["price"] = require_money(fields["price"], "Preço")
        return fields

    def list(self, company_id: str) -> Sequence[Product]:
        return self._products.list_for_company(company_id)

    def get(self, company_id: str, product_id: str) -> Product:
        product = self._products.get_by_id(company_id, product_id)
        if not product:
            raise NotFoundError("Produto não encontrado")
        return product

    def create(self, company_id: str, data: Mapping[str, Any]) -> str:
        fields = self._validated(data, partial=False)
        fields.setdefault("is_active", True)
        return self._products.create(company_id, fields)

    def update(self, company_id: str, product_id: str, data: Mapping[str, Any]) -> None:
        if not self._products.update(company_id, product_id, self._validated(data, partial=True)):
            raise NotFoundError("Produto não encontrado")

    def delete(self, company_id: str, product_id: str) -> None:
        if not self._products.soft_delete(company_id, product_id):
            raise NotFoundError("Produto não encontrado")


def _package_items(raw: Optional[Iterable[Mapping[str, Any]]]) -> list[PackageItem]:
    items: list[PackageItem] = []
    for entry in raw or []:
        product_id = require_non_empty(entry.get("product_id"), "Produto do pacote")
        quantity = entry.get("quantity")
        items.append(
            PackageItem(
                product_id=product_id,
                quantity=require_range(quantity, "Quantidade", 1, 10_000) if quantity not in (None, "") else 1,
                notes=entry.get("notes") or None,
            )
        )
    return items


class PackageService:
    """Bundles of products sold together at a monthly price."""

    def __init__(self, packages: PackageRepository):
        self._packages = packages

    def list(self, company_id: str) -> Sequence[Package]:
        return self._packages.list_for_company(company_id)

    def get(self, company_id: str, package_id: str) -> Package:
        package = self._packages.get_by_id(company_id, package_id)
        if not package:
            raise NotFoundError("Pacote não encontrado")
        return package

    def create(self, company_id: str, data: Mapping[str, Any]) -> str:
        fields = clean_payload(data, allowed=_PACKAGE_FIELDS)
        fields["name"] = require_non_empty(data.get("name"), "Nome do pacote")
        fields["monthly_price"] = require_money(data.get("monthly_price", 0), "Valor mensal")
        fields["is_active"] = bool(data.get("is_active", True))
        return self._packages.create(company_id, fields, _package_items(data.get("items")))

    def update(self, company_id: str, package_id: str, data: Mapping[str, Any]) -> None:
        fields = clean_payload(data, allowed=_PACKAGE_FIELDS)
        if "name" in data:
            fields["name"] = require_non_empty(data.get("name"), "Nome do pacote")
        if "monthly_price" in fields:
            fields["monthly_price"] = require_money(fields["monthly_price"], "Valor mensal")
        items = data.get("items")
        if items is not None and not isinstance(items, list):
            raise ValidationError("Itens do pacote inválidos")
        replaced = _package_items(items) if items is not None else None
        if not self._packages.update(company_id, package_id, fields, replaced):
            raise NotFoundError("Pacote não encontrado")

    def delete(self, company_id: str, package_id: str) -> None:
        if not self._packages.soft_delete(company_id, package_id):
            raise NotFoundError("Pacote não encontrado")
