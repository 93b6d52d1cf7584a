from __future__ import annotations

import json
import logging
from typing import MutableMapping, Optional

from ..core.exceptions import ValidationError
from .model import TransactionFilters

logger = logging.getLogger(__name__)


class TransactionFilterStore:
    """Remembers the transaction filters of each (user, company) pair.

    ``storage`` is any string mapping; the web layer passes the Flask session.
    Switching to another company clears the filters saved for it.
    """

    def __init__(self, storage: MutableMapping[str, str]):
        self._storage = storage

    @staticmethod
    def key(user_id: Optional[str], company_id: Optional[str]) -> str:
        return f"transaction-filters-{user_id}-{company_id or 'default'}"

    @staticmethod
    def last_company_key(user_id: Optional[str]) -> str:
        return f"last-company-{user_id}"

    def load(self, user_id: Optional[str], company_id: Optional[str]) -> TransactionFilters:
        raw = self._storage.get(self.key(user_id, company_id))
        if not raw:
            return TransactionFilters()
        try:
            data = json.loads(raw)
            if not isinstance(data, dict):
                return TransactionFilters()
            return TransactionFilters.from_mapping(data)
        except (ValueError, ValidationError):
            logger.debug("Discarding malformed filters under %s", self.key(user_id, company_id))
            return TransactionFilters()

    def save(self, user_id: Optional[str], company_id: Optional[str], filters: TransactionFilters) -> None:
        self._storage[self.key(user_id, company_id)] = json.dumps(filters.to_dict())

    def clear(self, user_id: Optional[str], company_id: Optional[str]) -> None:
        self.save(user_id, company_id, TransactionFilters())

    def sync_company(self, user_id: Optional[str], company_id: Optional[str]) -> bool:
        """Record the active company; returns True when filters were reset because it changed."""
        if not company_id:
            return False
        last_key = self.last_company_key(user_id)
        last = self._storage.get(last_key)
        changed = bool(last) and last != company_id
        if changed:
            self.clear(user_id, company_id)
        self._storage[last_key] = company_id
        return changed
