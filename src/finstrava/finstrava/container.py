from __future__ import annotations

from dataclasses import dataclass

from .catalog.mysql_catalog_repository import (
    MySQLCategoryRepository,
    MySQLPackageRepository,
    MySQLPaymentMethodRepository,
    MySQLProductCategoryRepository,
    MySQLProductRepository,
)
from .catalog.service import (
    CategoryService,
    PackageService,
    PaymentMethodService,
    ProductCategoryService,
    ProductService,
)
from .companies.mysql_company_repository import MySQLCompanyRepository
from .companies.mysql_settings_repository import MySQLSettingsRepository
from .companies.service import CompanyService, SettingsService
from .contracts.automation import ContractAutomationService
from .contracts.mysql_contract_repository import MySQLContractAutomationRepository, MySQLContractRepository
from .contracts.service import ContractService
from .customers.mysql_customer_repository import MySQLCustomerRepository
from .customers.service import CustomerService
from .dashboard.mysql_dashboard_repository import MySQLDashboardRepository
from .dashboard.service import DashboardService
from .database.connection import DBConfig, DatabaseConnection
from .hr.mysql_hr_repository import MySQLDepartmentRepository, MySQLEmployeeRepository, MySQLPositionRepository
from .hr.service import DepartmentService, EmployeeService, PositionService
from .payroll.mysql_payroll_repository import MySQLPayrollRepository
from .payroll.service import PayrollService
from .transactions.mysql_entry_repository import MySQLFinancialEntryRepository
from .transactions.service import TransactionService


@dataclass(frozen=True)
class Container:
    conn: DatabaseConnection

    companies_repo: MySQLCompanyRepository
    settings_repo: MySQLSettingsRepository
    customers_repo: MySQLCustomerRepository
    categories_repo: MySQLCategoryRepository
    payment_methods_repo: MySQLPaymentMethodRepository
    product_categories_repo: MySQLProductCategoryRepository
    products_repo: MySQLProductRepository
    packages_repo: MySQLPackageRepository
    contracts_repo: MySQLContractRepository
    automation_repo: MySQLContractAutomationRepository
    entries_repo: MySQLFinancialEntryRepository
    departments_repo: MySQLDepartmentRepository
    positions_repo: MySQLPositionRepository
    employees_repo: MySQLEmployeeRepository
    payrolls_repo: MySQLPayrollRepository
    dashboard_repo: MySQLDashboardRepository

    company_service: CompanyService
    settings_service: SettingsService
    customer_service: CustomerService
    category_service: CategoryService
    payment_method_service: PaymentMethodService
    product_category_service: ProductCategoryService
    product_service: ProductService
    package_service: PackageService
    contract_service: ContractService
    contract_automation_service: ContractAutomationService
    transaction_service: TransactionService
    department_service: DepartmentService
    position_service: PositionService
    employee_service: EmployeeService
    payroll_service: PayrollService
    dashboard_service: DashboardService


def build_container(*, db_config: dict) -> Container:
    config = DBConfig(
        host=str(db_config["host"]),
        port=int(db_config.get("port", 3306)),
        user=str(db_config["user"]),
        password=str(db_config["password"]),
        database=str(db_config["database"]),
    )
    conn = DatabaseConnection.get_instance(config)

    companies_repo = MySQLCompanyRepository(conn)
    settings_repo = MySQLSettingsRepository(conn)
    customers_repo = MySQLCustomerRepository(conn)
    categories_repo = MySQLCategoryRepository(conn)
    payment_methods_repo = MySQLPaymentMethodRepository(conn)
    product_categories_repo = MySQLProductCategoryRepository(conn)
    products_repo = MySQLProductRepository(conn)
    packages_repo = MySQLPackageRepository(conn)
    contracts_repo = MySQLContractRepository(conn)
    automation_repo = MySQLContractAutomationRepository(conn)
    entries_repo = MySQLFinancialEntryRepository(conn)
    departments_repo = MySQLDepartmentRepository(conn)
    positions_repo = MySQLPositionRepository(conn)
    employees_repo = MySQLEmployeeRepository(conn)
    payrolls_repo = MySQLPayrollRepository(conn)
    dashboard_repo = MySQLDashboardRepository(conn)

    return Container(
        conn=conn,
        companies_repo=companies_repo,
        settings_repo=settings_repo,
        customers_repo=customers_repo,
        categories_repo=categories_repo,
        payment_methods_repo=payment_methods_repo,
        product_categories_repo=product_categories_repo,
        products_repo=products_repo,
        packages_repo=packages_repo,
        contracts_repo=contracts_repo,
        automation_repo=automation_repo,
        entries_repo=entries_repo,
        departments_repo=departments_repo,
        positions_repo=positions_repo,
        employees_repo=employees_repo,
        payrolls_repo=payrolls_repo,
        dashboard_repo=dashboard_repo,
        company_service=CompanyService(companies_repo),
        settings_service=SettingsService(settings_repo),
        customer_service=CustomerService(customers_repo),
        category_service=CategoryService(categories_repo),
        payment_method_service=PaymentMethodService(payment_methods_repo),
        product_category_service=ProductCategoryService(product_categories_repo),
        product_service=ProductService(products_repo),
        package_service=PackageService(packages_repo),
        contract_service=ContractService(contracts_repo),
        contract_automation_service=ContractAutomationService(automation_repo),
        transaction_service=TransactionService(entries_repo),
        department_service=DepartmentService(departments_repo),
        position_service=PositionService(positions_repo),
        employee_service=EmployeeService(employees_repo),
        payroll_service=PayrollService(payrolls_repo),
        dashboard_service=DashboardService(dashboard_repo),
    )
