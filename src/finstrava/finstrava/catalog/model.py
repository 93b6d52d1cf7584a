from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Optional

from ..core.enums import CategoryType, ProductType


@dataclass(frozen=True)
class Category:
    id: str
    company_id: str
    name: str
    type: CategoryType
    parent_id: Optional[str] = None
    description: Optional[str] = None
    is_active: bool = True


@dataclass(frozen=True)
class PaymentMethod:
    id: str
    company_id: str
    name: str
    is_active: bool = True
    allows_installments: bool = False
    max_installments: Optional[int] = None


@dataclass(frozen=True)
class Product:
    id: str
    company_id: str
    name: str
    type: ProductType
    category_id: Optional[str] = None
    description: Optional[str] = None
    price: Optional[Decimal] = None
    unit: Optional[str] = None
    is_recurring: bool = False
    is_active: bool = True


@dataclass(frozen=True)
class PackageItem:
    product_id: str
    quantity: int = 1
    notes: Optional[str] = None
    id: Optional[str] = None
    product_name: Optional[str] = None


@dataclass(frozen=True)
class Package:
    id: str
    company_id: str
    name: str
    monthly_price: Decimal
    description: Optional[str] = None
    is_active: bool = True
    notes: Optional[str] = None
    items: list[PackageItem] = field(default_factory=list)


@dataclass(frozen=True)
class ProductCategory:
    id: str
    company_id: str
    name: str
    parent_id: Optional[str] = None
    description: Optional[str] = None
    color: Optional[str] = None
    icon: Optional[str] = None
    sort_order: int = 0
    is_active: bool = True
