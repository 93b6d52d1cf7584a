from __future__ import annotations

from datetime import date

from src.finstrava.finstrava.core.enums import EntryStatus, EntryType
from src.finstrava.finstrava.transactions.filter_store import TransactionFilterStore
from src.finstrava.finstrava.transactions.model import TransactionFilters


def test_saved_filters_are_loaded_back_per_user_and_company():
    storage: dict[str, str] = {}
    store = TransactionFilterStore(storage)
    filters = TransactionFilters(type=EntryType.EXPENSE, status=EntryStatus.OVERDUE, date_from=date(2025, 1, 1))

    store.save("u1", "co1", filters)

    assert "transaction-filters-u1-co1" in storage
    assert store.load("u1", "co1") == filters
    assert store.load("u1", "co2").is_empty()
    assert store.load("u2", "co1").is_empty()


def test_missing_company_uses_default_key():
    assert TransactionFilterStore.key("u1", None) == "transaction-filters-u1-default"


def test_malformed_stored_filters_fall_back_to_empty():
    storage = {
        "transaction-filters-u1-co1": "{not json",
        "transaction-filters-u1-co2": "[1, 2]",
        "transaction-filters-u1-co3": '{"status": "lost"}',
    }
    store = TransactionFilterStore(storage)

    for company in ("co1", "co2", "co3"):
        assert store.load("u1", company).is_empty()


def test_switching_company_resets_filters_of_the_new_company():
    storage: dict[str, str] = {}
    store = TransactionFilterStore(storage)

    assert store.sync_company("u1", "co1") is False
    store.save("u1", "co2", TransactionFilters(search="aluguel"))

    assert store.sync_company("u1", "co2") is True
    assert store.load("u1", "co2").is_empty()
    assert storage["last-company-u1"] == "co2"


def test_same_company_keeps_filters():
    storage: dict[str, str] = {}
    store = TransactionFilterStore(storage)
    store.sync_company("u1", "co1")
    store.save("u1", "co1", TransactionFilters(search="aluguel"))

    assert store.sync_company("u1", "co1") is False
    assert store.load("u1", "co1").search == "aluguel"


def test_from_mapping_treats_blank_values_as_unset():
    filters = TransactionFilters.from_mapping({"type": "", "status": "paid", "search": "  ", "date_to": ""})

    assert filters.type is None
    assert filters.status == EntryStatus.PAID
    assert filters.search is None
    assert filters.to_dict() == {"status": "paid"}
