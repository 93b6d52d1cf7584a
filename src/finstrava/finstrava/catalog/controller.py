from __future__ import annotations

from flask import Flask, request

from ..common.web import api_view, current_company_id, json_body, json_ok, login_required
from ..container import Container


def register(app: Flask, container: Container) -> None:
    categories = container.category_service
    methods = container.payment_method_service
    product_categories = container.product_category_service
    products = container.product_service
    packages = container.package_service

    # Categories

    @app.route("/api/categories", methods=["GET"], endpoint="categories_list")
    @login_required
    @api_view("Erro ao carregar categorias")
    def categories_list():
        category_type = request.args.get("type")
        if category_type:
            return json_ok(categories.list_by_type(current_company_id(), category_type))
        return json_ok(categories.list(current_company_id()))

    @app.route("/api/categories", methods=["POST"], endpoint="categories_create")
    @login_required
    @api_view("Erro ao criar categoria")
    def categories_create():
        return json_ok({"id": categories.create(current_company_id(), json_body())}, status=201)

    @app.route("/api/categories/<category_id>", methods=["PUT"], endpoint="categories_update")
    @login_required
    @api_view("Erro ao atualizar categoria")
    def categories_update(category_id: str):
        categories.update(current_company_id(), category_id, json_body())
        return json_ok()

    @app.route("/api/categories/<category_id>", methods=["DELETE"], endpoint="categories_delete")
    @login_required
    @api_view("Erro ao excluir categoria")
    def categories_delete(category_id: str):
        categories.delete(current_company_id(), category_id)
        return json_ok()

    # Payment methods

    @app.route("/api/payment-methods", methods=["GET"], endpoint="payment_methods_list")
    @login_required
    @api_view("Erro ao carregar formas de pagamento")
    def payment_methods_list():
        if request.args.get("active") in ("1", "true"):
            return json_ok(methods.active(current_company_id()))
        return json_ok(methods.list(current_company_id()))

    @app.route("/api/payment-methods", methods=["POST"], endpoint="payment_methods_create")
    @login_required
    @api_view("Erro ao criar forma de pagamento")
    def payment_methods_create():
        return json_ok({"id": methods.create(current_company_id(), json_body())}, status=201)

    @app.route("/api/payment-methods/<method_id>", methods=["PUT"], endpoint="payment_methods_update")
    @login_required
    @api_view("Erro ao atualizar forma de pagamento")
    def payment_methods_update(method_id: str):
        methods.update(current_company_id(), method_id, json_body())
        return json_ok()

    @app.route("/api/payment-methods/<method_id>", methods=["DELETE"], endpoint="payment_methods_delete")
    @login_required
    @api_view("Erro ao excluir forma de pagamento")
    def payment_methods_delete(method_id: str):
        methods.delete(current_company_id(), method_id)
        return json_ok()

    # Product categories

    @app.route("/api/product-categories", methods=["GET"], endpoint="product_categories_list")
    @login_required
    @api_view("Erro ao carregar categorias de produtos")
    def product_categories_list():
        company_id = current_company_id()
        view = request.args.get("view", "")
        if view == "tree":
            return json_ok(product_categories.tree(company_id))
        if view == "flat":
            return json_ok(product_categories.flat(company_id))
        if view == "roots":
            return json_ok(product_categories.roots(company_id))
        if view == "active":
            return json_ok(product_categories.active(company_id))
        return json_ok(product_categories.list(company_id))

    @app.route("/api/product-categories", methods=["POST"], endpoint="product_categories_create")
    @login_required
    @api_view("Erro ao criar categoria de produto")
    def product_categories_create():
        return json_ok({"id": product_categories.create(current_company_id(), json_body())}, status=201)

    @app.route("/api/product-categories/<category_id>", methods=["GET"], endpoint="product_categories_get")
    @login_required
    @api_view("Erro ao carregar categoria de produto")
    def product_categories_get(category_id: str):
        return json_ok(product_categories.get(current_company_id(), category_id))

    @app.route("/api/product-categories/<category_id>/children", methods=["GET"],
               endpoint="product_categories_children")
    @login_required
    @api_view("Erro ao carregar categorias de produtos")
    def product_categories_children(category_id: str):
        return json_ok(product_categories.children(current_company_id(), category_id))

    @app.route("/api/product-categories/<category_id>", methods=["PUT"], endpoint="product_categories_update")
    @login_required
    @api_view("Erro ao atualizar categoria de produto")
    def product_categories_update(category_id: str):
        product_categories.update(current_company_id(), category_id, json_body())
        return json_ok()

    @app.route("/api/product-categories/<category_id>", methods=["DELETE"], endpoint="product_categories_delete")
    @login_required
    @api_view("Erro ao excluir categoria de produto")
    def product_categories_delete(category_id: str):
        product_categories.delete(current_company_id(), category_id)
        return json_ok()

    # Products

    @app.route("/api/products", methods=["GET"], endpoint="products_list")
    @login_required
    @api_view("Erro ao carregar produtos")
    def products_list():
        return json_ok(products.list(current_company_id()))

    @app.route("/api/products", methods=["POST"], endpoint="products_create")
    @login_required
    @api_view("Erro ao criar produto")
    def products_create():
        return json_ok({"id": products.create(current_company_id(), json_body())}, status=201)

    @app.route("/api/products/<product_id>", methods=["GET"], endpoint="products_get")
    @login_required
    @api_view("Erro ao carregar produto")
    def products_get(product_id: str):
        return json_ok(products.get(current_company_id(), product_id))

    @app.route("/api/products/<product_id>", methods=["PUT"], endpoint="products_update")
    @login_required
    @api_view("Erro ao atualizar produto")
    def products_update(product_id: str):
        products.update(current_company_id(), product_id, json_body())
        return json_ok()

    @app.route("/api/products/<product_id>", methods=["DELETE"], endpoint="products_delete")
    @login_required
    @api_view("Erro ao excluir produto")
    def products_delete(product_id: str):
        products.delete(current_company_id(), product_id)
        return json_ok()

    # Packages

    @app.route("/api/packages", methods=["GET"], endpoint="packages_list")
    @login_required
    @api_view("Erro ao carregar pacotes")
    def packages_list():
        return json_ok(packages.list(current_company_id()))

    @app.route("/api/packages", methods=["POST"], endpoint="packages_create")
    @login_required
    @api_view("Erro ao criar pacote")
    def packages_create():
        return json_ok({"id": packages.create(current_company_id(), json_body())}, status=201)

    @app.route("/api/packages/<package_id>", methods=["GET"], endpoint="packages_get")
    @login_required
    @api_view("Erro ao carregar pacote")
    def packages_get(package_id: str):
        return json_ok(packages.get(current_company_id(), package_id))

    @app.route("/api/packages/<package_id>", methods=["PUT"], endpoint="packages_update")
    @login_required
    @api_view("Erro ao atualizar pacote")
    def packages_update(package_id: str):
        packages.update(current_company_id(), package_id, json_body())
        return json_ok()

    @app.route("/api/packages/<package_id>", methods=["DELETE"], endpoint="packages_delete")
    @login_required
    @api_view("Erro ao excluir pacote")
    def packages_delete(package_id: str):
        packages.delete(current_company_id(), package_id)
        return json_ok()
