from __future__ import annotations

import pytest

from src.finstrava.finstrava.catalog.model import ProductCategory
from src.finstrava.finstrava.catalog.service import ProductCategoryService
from src.finstrava.finstrava.core.exceptions import NotFoundError, ValidationError


def _cat(cat_id, name, parent_id=None, is_active=True):
    return ProductCategory(id=cat_id, company_id="co1", name=name, parent_id=parent_id, is_active=is_active)


# Serviços
# ├── Consultoria
# │   └── Implantação
# └── Suporte
# Hardware (inativo)
CATEGORIES = [
    _cat("srv", "Serviços"),
    _cat("con", "Consultoria", "srv"),
    _cat("imp", "Implantação", "con"),
    _cat("sup", "Suporte", "srv"),
    _cat("hw", "Hardware", is_active=False),
]


class InMemoryProductCategories:
    def __init__(self, categories=()):
        self.categories = list(categories)
        self.created = []
        self.updates = []

    def list_for_company(self, company_id):
        return [c for c in self.categories if c.company_id == company_id]

    def get_by_id(self, company_id, category_id):
        return next((c for c in self.list_for_company(company_id) if c.id == category_id), None)

    def create(self, company_id, data):
        self.created.append(dict(data))
        return "pc-new"

    def update(self, company_id, category_id, data):
        self.updates.append((category_id, dict(data)))
        return self.get_by_id(company_id, category_id) is not None

    def soft_delete(self, company_id, category_id):
        return self.get_by_id(company_id, category_id) is not None


def test_create_defaults_to_active_root():
    repo = InMemoryProductCategories()
    ProductCategoryService(repo).create("co1", {"name": "Licenças", "parent_id": "", "color": "#00aa00"})

    assert repo.created == [{"name": "Licenças", "parent_id": None, "color": "#00aa00", "is_active": True}]


def test_create_requires_name():
    with pytest.raises(ValidationError):
        ProductCategoryService(InMemoryProductCategories()).create("co1", {"name": "  "})


def test_tree_and_flat_paths():
    service = ProductCategoryService(InMemoryProductCategories(CATEGORIES))

    top = service.tree("co1")
    assert [n.item.id for n in top] == ["srv", "hw"]
    assert top[0].children[0].children[0].level == 2

    assert [p.path for p in service.flat("co1")][:3] == [
        "Serviços",
        "Serviços > Consultoria",
        "Serviços > Consultoria > Implantação",
    ]


def test_roots_children_and_active():
    service = ProductCategoryService(InMemoryProductCategories(CATEGORIES))

    assert [c.id for c in service.roots("co1")] == ["srv"]
    assert [c.id for c in service.children("co1", "srv")] == ["con", "sup"]
    assert "hw" not in {c.id for c in service.active("co1")}


def test_update_refuses_descendant_as_parent():
    repo = InMemoryProductCategories(CATEGORIES)
    service = ProductCategoryService(repo)

    with pytest.raises(ValidationError):
        service.update("co1", "srv", {"parent_id": "imp"})
    assert repo.updates == []

    service.update("co1", "sup", {"parent_id": "con"})
    assert repo.updates == [("sup", {"parent_id": "con"})]


def test_update_with_blank_parent_moves_to_root():
    repo = InMemoryProductCategories(CATEGORIES)
    ProductCategoryService(repo).update("co1", "imp", {"parent_id": None})
    assert repo.updates == [("imp", {"parent_id": None})]


def test_missing_category_is_not_found():
    with pytest.raises(NotFoundError):
        ProductCategoryService(InMemoryProductCategories()).get("co1", "nope")


def test_tree_endpoint(make_client):
    client = make_client(product_category_service=ProductCategoryService(InMemoryProductCategories(CATEGORIES)))
    body = client.get("/api/product-categories?view=tree").get_json()

    assert body["success"] is True
    assert [n["item"]["name"] for n in body["data"]] == ["Serviços", "Hardware"]
    assert body["data"][0]["children"][0]["item"]["id"] == "con"
