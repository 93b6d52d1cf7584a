from __future__ import annotations

from decimal import Decimal
from typing import Any, Mapping, Optional, Sequence

from ..core.enums import CategoryType, ProductType
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, exists, fetchall, fetchone, insert_row, soft_delete, update_row
from .model import Category, Package, PackageItem, PaymentMethod, Product, ProductCategory
from .repository import (
    CategoryRepository,
    PackageRepository,
    PaymentMethodRepository,
    ProductCategoryRepository,
    ProductRepository,
)


def _row_to_category(r: dict) -> Category:
    return Category(
        id=str(r["id"]),
        company_id=str(r["company_id"]),
        name=r["name"],
        type=CategoryType(r["type"]),
        parent_id=str(r["parent_id"]) if r.get("parent_id") else None,
        description=r.get("description"),
        is_active=bool(r.get("is_active", True)),
    )


def _row_to_product(r: dict) -> Product:
    return Product(
        id=str(r["id"]),
        company_id=str(r["company_id"]),
        name=r["name"],
        type=ProductType(r["type"]),
        category_id=str(r["category_id"]) if r.get("category_id") else None,
        description=r.get("description"),
        price=Decimal(str(r["price"])) if r.get("price") is not None else None,
        unit=r.get("unit"),
        is_recurring=bool(r.get("is_recurring")),
        is_active=bool(r.get("is_active", True)),
    )


class MySQLCategoryRepository(CategoryRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_for_company(self, company_id: str, *, type: Optional[CategoryType] = None) -> Sequence[Category]:
        sql = """
            SELECT id, company_id, name, type, parent_id, description, is_active
            FROM categories
            WHERE company_id=%s AND deleted_at IS NULL
        """
        params: list = [company_id]
        if type is not None:
            sql += " AND type=%s AND is_active=1 ORDER BY name"
            params.append(type.value)
        else:
            sql += " ORDER BY type, name"
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(sql, tuple(params))
            return [_row_to_category(r) for r in fetchall(cur)]

    def get_by_id(self, company_id: str, category_id: str) -> Optional[Category]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT id, company_id, name, type, parent_id, description, is_active
                FROM categories
                WHERE id=%s AND company_id=%s AND deleted_at IS NULL
                """,
                (category_id, company_id),
            )
            row = fetchone(cur)
            return _row_to_category(row) if row else None

    def create(self, company_id: str, data: Mapping[str, Any]) -> str:
        with db_cursor(self._conn_factory) as (_, cur):
            return insert_row(cur, "categories", {**data, "company_id": company_id})

    def update(self, company_id: str, category_id: str, data: Mapping[str, Any]) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            return update_row(cur, "categories", category_id, data, company_id=company_id, exclude_deleted=True)

    def soft_delete(self, company_id: str, category_id: str) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            return soft_delete(cur, "categories", category_id, company_id=company_id)


class MySQLPaymentMethodRepository(PaymentMethodRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_for_company(self, company_id: str) -> Sequence[PaymentMethod]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT id, company_id, name, is_active, allows_installments, max_installments
                FROM payment_methods
                WHERE company_id=%s AND deleted_at IS NULL
                ORDER BY name
                """,
                (company_id,),
            )
            return [
                PaymentMethod(
                    id=str(r["id"]),
                    company_id=str(r["company_id"]),
                    name=r["name"],
                    is_active=bool(r.get("is_active", True)),
                    allows_installments=bool(r.get("allows_installments")),
                    max_installments=r.get("max_installments"),
                )
                for r in fetchall(cur)
            ]

    def create(self, company_id: str, data: Mapping[str, Any]) -> str:
        with db_cursor(self._conn_factory) as (_, cur):
            return insert_row(cur, "payment_methods", {**data, "company_id": company_id})

    def update(self, company_id: str, method_id: str, data: Mapping[str, Any]) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            return update_row(cur, "payment_methods", method_id, data, company_id=company_id, exclude_deleted=True)

    def soft_delete(self, company_id: str, method_id: str) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            return soft_delete(cur, "payment_methods", method_id, company_id=company_id)


def _row_to_product_category(r: dict) -> ProductCategory:
    return ProductCategory(
        id=str(r["id"]),
        company_id=str(r["company_id"]),
        name=r["name"],
        parent_id=str(r["parent_id"]) if r.get("parent_id") else None,
        description=r.get("description"),
        color=r.get("color"),
        icon=r.get("icon"),
        sort_order=int(r.get("sort_order") or 0),
        is_active=bool(r.get("is_active", True)),
    )


class MySQLProductCategoryRepository(ProductCategoryRepository):
    _SELECT = """
        SELECT id, company_id, parent_id, name, description, color, icon, sort_order, is_active
        FROM product_categories
    """

    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_for_company(self, company_id: str) -> Sequence[ProductCategory]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"{self._SELECT} WHERE company_id=%s AND deleted_at IS NULL ORDER BY sort_order, name",
                (company_id,),
            )
            return [_row_to_product_category(r) for r in fetchall(cur)]

    def get_by_id(self, company_id: str, category_id: str) -> Optional[ProductCategory]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"{self._SELECT} WHERE id=%s AND company_id=%s AND deleted_at IS NULL",
                (category_id, company_id),
            )
            row = fetchone(cur)
            return _row_to_product_category(row) if row else None

    def create(self, company_id: str, data: Mapping[str, Any]) -> str:
        with db_cursor(self._conn_factory) as (_, cur):
            return insert_row(cur, "product_categories", {**data, "company_id": company_id})

    def update(self, company_id: str, category_id: str, data: Mapping[str, Any]) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            return update_row(
                cur, "product_categories", category_id, data, company_id=company_id, exclude_deleted=True
            )

    def soft_delete(self, company_id: str, category_id: str) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            return soft_delete(cur, "product_categories", category_id, company_id=company_id)


class MySQLProductRepository(ProductRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_for_company(self, company_id: str) -> Sequence[Product]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT id, company_id, category_id, name, description, type, price, unit,
                       is_recurring, is_active
                FROM products
                WHERE company_id=%s AND deleted_at IS NULL
                ORDER BY name
                """,
                (company_id,),
            )
            return [_row_to_product(r) for r in fetchall(cur)]

    def get_by_id(self, company_id: str, product_id: str) -> Optional[Product]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT id, company_id, category_id, name, description, type, price, unit,
                       is_recurring, is_active
                FROM products
                WHERE id=%s AND company_id=%s AND deleted_at IS NULL
                """,
                (product_id, company_id),
            )
            row = fetchone(cur)
            return _row_to_product(row) if row else None

    def create(self, company_id: str, data: Mapping[str, Any]) -> str:
        with db_cursor(self._conn_factory) as (_, cur):
            return insert_row(cur, "products", {**data, "company_id": company_id})

    def update(self, company_id: str, product_id: str, data: Mapping[str, Any]) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            return update_row(cur, "products", product_id, data, company_id=company_id, exclude_deleted=True)

    def soft_delete(self, company_id: str, product_id: str) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            return soft_delete(cur, "products", product_id, company_id=company_id)


class MySQLPackageRepository(PackageRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def _load_items(self, cur, package_ids: Sequence[str]) -> dict[str, list[PackageItem]]:
        if not package_ids:
            return {}
        placeholders = ",".join(["%s"] * len(package_ids))
        cur.execute(
            f"""
            SELECT pi.id, pi.package_id, pi.product_id, pi.quantity, pi.notes, p.name AS product_name
            FROM package_items pi
            LEFT JOIN products p ON p.id = pi.product_id
            WHERE pi.package_id IN ({placeholders})
            ORDER BY pi.created_at
            """,
            tuple(package_ids),
        )
        out: dict[str, list[PackageItem]] = {}
        for r in fetchall(cur):
            out.setdefault(str(r["package_id"]), []).append(
                PackageItem(
                    id=str(r["id"]),
                    product_id=str(r["product_id"]),
                    quantity=int(r.get("quantity") or 1),
                    notes=r.get("notes"),
                    product_name=r.get("product_name"),
                )
            )
        return out

    def _select(self, cur, where: str, params: tuple) -> list[Package]:
        cur.execute(
            f"""
            SELECT id, company_id, name, description, monthly_price, is_active, notes
            FROM packages
            WHERE {where}
            ORDER BY name
            """,
            params,
        )
        rows = fetchall(cur)
        items = self._load_items(cur, [str(r["id"]) for r in rows])
        return [
            Package(
                id=str(r["id"]),
                company_id=str(r["company_id"]),
                name=r["name"],
                monthly_price=Decimal(str(r.get("monthly_price") or 0)),
                description=r.get("description"),
                is_active=bool(r.get("is_active", True)),
                notes=r.get("notes"),
                items=items.get(str(r["id"]), []),
            )
            for r in rows
        ]

    def _insert_items(self, cur, package_id: str, items: Sequence[PackageItem]) -> None:
        for item in items:
            insert_row(
                cur,
                "package_items",
                {
                    "package_id": package_id,
                    "product_id": item.product_id,
                    "quantity": item.quantity,
                    "notes": item.notes,
                },
            )

    def list_for_company(self, company_id: str) -> Sequence[Package]:
        with db_cursor(self._conn_factory) as (_, cur):
            return self._select(cur, "company_id=%s AND deleted_at IS NULL", (company_id,))

    def get_by_id(self, company_id: str, package_id: str) -> Optional[Package]:
        with db_cursor(self._conn_factory) as (_, cur):
            found = self._select(cur, "id=%s AND company_id=%s AND deleted_at IS NULL", (package_id, company_id))
            return found[0] if found else None

    def create(self, company_id: str, data: Mapping[str, Any], items: Sequence[PackageItem]) -> str:
        with db_cursor(self._conn_factory) as (_, cur):
            package_id = insert_row(cur, "packages", {**data, "company_id": company_id})
            self._insert_items(cur, package_id, items)
            return package_id

    def update(
        self,
        company_id: str,
        package_id: str,
        data: Mapping[str, Any],
        items: Optional[Sequence[PackageItem]] = None,
    ) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            if data:
                found = update_row(cur, "packages", package_id, data, company_id=company_id, exclude_deleted=True)
            else:
                found = exists(cur, "packages", package_id, company_id=company_id, exclude_deleted=True)
            if not found:
                return False
            if items is not None:
                cur.execute("DELETE FROM package_items WHERE package_id=%s", (package_id,))
                self._insert_items(cur, package_id, items)
            return True

    def soft_delete(self, company_id: str, package_id: str) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            return soft_delete(cur, "packages", package_id, company_id=company_id)
