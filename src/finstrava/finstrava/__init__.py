"""Finstrava backend package.

Organized by feature modules (companies, customers, contracts, payroll, ...)
with a thin Flask controller layer over service/repository layers. Business
rules such as renewals and payroll calculation live in stored procedures of
the database; the services here only call them.
"""
