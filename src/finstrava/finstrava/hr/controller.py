from __future__ import annotations

from flask import Flask, request

from ..common.web import api_view, current_company_id, json_body, json_ok, login_required
from ..container import Container


def register(app: Flask, container: Container) -> None:
    departments = container.department_service
    positions = container.position_service
    employees = container.employee_service

    # Departments

    @app.route("/api/departments", methods=["GET"], endpoint="departments_list")
    @login_required
    @api_view("Erro ao carregar departamentos")
    def departments_list():
        company_id = current_company_id()
        view = request.args.get("view", "")
        if view == "tree":
            return json_ok(departments.tree(company_id))
        if view == "flat":
            return json_ok(departments.flat(company_id))
        if view == "roots":
            return json_ok(departments.roots(company_id))
        if view == "active":
            return json_ok(departments.active(company_id))
        return json_ok(departments.list(company_id))

    @app.route("/api/departments", methods=["POST"], endpoint="departments_create")
    @login_required
    @api_view("Erro ao criar departamento")
    def departments_create():
        return json_ok({"id": departments.create(current_company_id(), json_body())}, status=201)

    @app.route("/api/departments/<department_id>", methods=["GET"], endpoint="departments_get")
    @login_required
    @api_view("Erro ao carregar departamento")
    def departments_get(department_id: str):
        return json_ok(departments.get(current_company_id(), department_id))

    @app.route("/api/departments/<department_id>/children", methods=["GET"], endpoint="departments_children")
    @login_required
    @api_view("Erro ao carregar departamentos")
    def departments_children(department_id: str):
        return json_ok(departments.children(current_company_id(), department_id))

    @app.route("/api/departments/<department_id>/can-be-parent/<candidate_id>", methods=["GET"],
               endpoint="departments_can_be_parent")
    @login_required
    @api_view("Erro ao validar departamento")
    def departments_can_be_parent(department_id: str, candidate_id: str):
        return json_ok({"allowed": departments.can_be_parent(current_company_id(), department_id, candidate_id)})

    @app.route("/api/departments/<department_id>", methods=["PUT"], endpoint="departments_update")
    @login_required
    @api_view("Erro ao atualizar departamento")
    def departments_update(department_id: str):
        departments.update(current_company_id(), department_id, json_body())
        return json_ok()

    @app.route("/api/departments/<department_id>", methods=["DELETE"], endpoint="departments_delete")
    @login_required
    @api_view("Erro ao excluir departamento")
    def departments_delete(department_id: str):
        departments.delete(current_company_id(), department_id)
        return json_ok()

    # Positions

    @app.route("/api/positions", methods=["GET"], endpoint="positions_list")
    @login_required
    @api_view("Erro ao carregar cargos")
    def positions_list():
        company_id = current_company_id()
        department_id = request.args.get("department_id")
        if department_id:
            return json_ok(positions.by_department(company_id, department_id))
        if request.args.get("active") in ("1", "true"):
            return json_ok(positions.active(company_id))
        return json_ok(positions.list(company_id))

    @app.route("/api/positions", methods=["POST"], endpoint="positions_create")
    @login_required
    @api_view("Erro ao criar cargo")
    def positions_create():
        return json_ok({"id": positions.create(current_company_id(), json_body())}, status=201)

    @app.route("/api/positions/<position_id>", methods=["GET"], endpoint="positions_get")
    @login_required
    @api_view("Erro ao carregar cargo")
    def positions_get(position_id: str):
        return json_ok(positions.get(current_company_id(), position_id))

    @app.route("/api/positions/<position_id>", methods=["PUT"], endpoint="positions_update")
    @login_required
    @api_view("Erro ao atualizar cargo")
    def positions_update(position_id: str):
        positions.update(current_company_id(), position_id, json_body())
        return json_ok()

    @app.route("/api/positions/<position_id>", methods=["DELETE"], endpoint="positions_delete")
    @login_required
    @api_view("Erro ao excluir cargo")
    def positions_delete(position_id: str):
        positions.delete(current_company_id(), position_id)
        return json_ok()

    # Employees

    @app.route("/api/employees", methods=["GET"], endpoint="employees_list")
    @login_required
    @api_view("Erro ao carregar funcionários")
    def employees_list():
        company_id = current_company_id()
        department_id = request.args.get("department_id")
        view = request.args.get("view", "")
        if department_id:
            return json_ok(employees.by_department(company_id, department_id))
        if view == "active":
            return json_ok(employees.active(company_id))
        if view == "payroll":
            return json_ok(employees.payroll_eligible(company_id))
        return json_ok(employees.list(company_id))

    @app.route("/api/employees/total-salaries", methods=["GET"], endpoint="employees_total_salaries")
    @login_required
    @api_view("Erro ao calcular salários")
    def employees_total_salaries():
        return json_ok({"total": employees.total_base_salary(current_company_id())})

    @app.route("/api/employees", methods=["POST"], endpoint="employees_create")
    @login_required
    @api_view("Erro ao criar funcionário")
    def employees_create():
        return json_ok({"id": employees.create(current_company_id(), json_body())}, status=201)

    @app.route("/api/employees/<employee_id>", methods=["GET"], endpoint="employees_get")
    @login_required
    @api_view("Erro ao carregar funcionário")
    def employees_get(employee_id: str):
        return json_ok(employees.get(current_company_id(), employee_id))

    @app.route("/api/employees/<employee_id>", methods=["PUT"], endpoint="employees_update")
    @login_required
    @api_view("Erro ao atualizar funcionário")
    def employees_update(employee_id: str):
        employees.update(current_company_id(), employee_id, json_body())
        return json_ok()

    @app.route("/api/employees/<employee_id>", methods=["DELETE"], endpoint="employees_delete")
    @login_required
    @api_view("Erro ao excluir funcionário")
    def employees_delete(employee_id: str):
        employees.delete(current_company_id(), employee_id)
        return json_ok()
