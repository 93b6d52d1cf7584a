from __future__ import annotations

import pytest

from src.finstrava.finstrava.core.exceptions import ValidationError
from src.finstrava.finstrava.common import tree
from src.finstrava.finstrava.hr.model import Department
from src.finstrava.finstrava.hr.service import DepartmentService


def _dept(dept_id, name, parent_id=None, is_active=True):
    return Department(id=dept_id, company_id="co1", name=name, parent_id=parent_id, is_active=is_active)


# Diretoria
# ├── Financeiro
# │   └── Contas a pagar
# └── Comercial
# Operações (inativo)
DEPARTMENTS = [
    _dept("dir", "Diretoria"),
    _dept("fin", "Financeiro", "dir"),
    _dept("cap", "Contas a pagar", "fin"),
    _dept("com", "Comercial", "dir"),
    _dept("ops", "Operações", is_active=False),
]


class InMemoryDepartments:
    def __init__(self, departments):
        self.departments = list(departments)
        self.updates = []

    def list_for_company(self, company_id):
        return [d for d in self.departments if d.company_id == company_id]

    def update(self, company_id, department_id, data):
        self.updates.append(dict(data))
        return any(d.id == department_id for d in self.departments)


def test_build_tree_nests_children_and_assigns_levels():
    top = tree.build_tree(DEPARTMENTS)

    assert [n.item.id for n in top] == ["dir", "ops"]
    diretoria = top[0]
    assert [c.item.id for c in diretoria.children] == ["fin", "com"]
    contas = diretoria.children[0].children[0]
    assert contas.item.id == "cap"
    assert contas.level == 2


def test_orphans_become_roots():
    top = tree.build_tree([_dept("a", "A", parent_id="gone")])
    assert [n.item.id for n in top] == ["a"]
    assert top[0].level == 0


def test_cycles_do_not_lose_departments():
    looped = [_dept("a", "A", "b"), _dept("b", "B", "a")]
    top = tree.build_tree(looped)
    assert {n.item.id for n in top} == {"a", "b"}


def test_flatten_builds_paths_depth_first():
    paths = [(p.path, p.level) for p in tree.flatten(DEPARTMENTS)]
    assert paths == [
        ("Diretoria", 0),
        ("Diretoria > Financeiro", 1),
        ("Diretoria > Financeiro > Contas a pagar", 2),
        ("Diretoria > Comercial", 1),
        ("Operações", 0),
    ]


def test_roots_children_and_active():
    assert [d.id for d in tree.roots(DEPARTMENTS)] == ["dir"]
    assert [d.id for d in tree.children_of(DEPARTMENTS, "dir")] == ["fin", "com"]
    assert "ops" not in {d.id for d in tree.active(DEPARTMENTS)}


@pytest.mark.parametrize(
    "department_id, candidate_id, allowed",
    [
        ("fin", None, True),
        ("fin", "", True),
        ("fin", "fin", False),
        ("dir", "cap", False),
        ("dir", "fin", False),
        ("com", "fin", True),
        ("cap", "com", True),
    ],
)
def test_can_be_parent(department_id, candidate_id, allowed):
    assert tree.can_be_parent(DEPARTMENTS, department_id, candidate_id) is allowed


def test_update_refuses_parent_that_would_create_cycle():
    repo = InMemoryDepartments(DEPARTMENTS)
    service = DepartmentService(repo)

    with pytest.raises(ValidationError):
        service.update("co1", "dir", {"parent_id": "cap"})
    assert repo.updates == []


def test_update_with_blank_parent_moves_department_to_root():
    repo = InMemoryDepartments(DEPARTMENTS)
    DepartmentService(repo).update("co1", "fin", {"parent_id": ""})
    assert repo.updates == [{"parent_id": None}]
