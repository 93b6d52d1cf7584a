from __future__ import annotations

import io
from typing import Iterable

import pandas as pd

from .model import FinancialEntry

XLSX_MIMETYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"

_TYPE_LABELS = {"income": "Receita", "expense": "Despesa"}
_STATUS_LABELS = {"pending": "Pendente", "paid": "Pago", "overdue": "Vencido", "cancelled": "Cancelado"}

COLUMNS = (
    "Vencimento",
    "Descrição",
    "Tipo",
    "Status",
    "Valor",
    "Valor Pago",
    "Pagamento",
    "Cliente",
    "Categoria",
    "Forma de Pagamento",
    "Contrato",
    "Parcela",
)


def entries_to_rows(entries: Iterable[FinancialEntry]) -> list[dict]:
    rows = []
    for e in entries:
        rows.append(
            {
                "Vencimento": e.due_date.isoformat() if e.due_date else "",
                "Descrição": e.description,
                "Tipo": _TYPE_LABELS.get(e.type.value, e.type.value),
                "Status": _STATUS_LABELS.get(e.status.value, e.status.value),
                "Valor": float(e.amount),
                "Valor Pago": float(e.payment_amount) if e.payment_amount is not None else None,
                "Pagamento": e.payment_date.isoformat() if e.payment_date else "",
                "Cliente": e.customer_name or "",
                "Categoria": e.category_name or "",
                "Forma de Pagamento": e.payment_method_name or "",
                "Contrato": e.contract_title or "",
                "Parcela": f"{e.installment}/{e.total_installments}" if e.installment else "",
            }
        )
    return rows


def export_entries_xlsx(entries: Iterable[FinancialEntry]) -> io.BytesIO:
    """Write the entries to an in-memory workbook, one row per entry."""
    df = pd.DataFrame(entries_to_rows(entries), columns=list(COLUMNS))

    output = io.BytesIO()
    with pd.ExcelWriter(output, engine="openpyxl") as writer:
        df.to_excel(writer, index=False, sheet_name="Lancamentos")
    output.seek(0)
    return output
