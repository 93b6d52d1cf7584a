from __future__ import annotations

import dataclasses

import pytest

from src.finstrava.finstrava.container import Container
from src.finstrava.finstrava.main import create_app

CRON_SECRET = "s3cret"


@pytest.fixture
def make_client():
    """Build a Flask test client over a container holding only the given services.

    Fields that are not passed stay ``None``; the controllers only touch the
    services they are registered with when a route is hit.
    """

    def _make(*, login: bool = True, company_id: str | None = "co1", config: dict | None = None, **services):
        values = {f.name: services.get(f.name) for f in dataclasses.fields(Container)}
        app = create_app(
            container=Container(**values),
            config={"TESTING": True, "CRON_SECRET": CRON_SECRET, **(config or {})},
        )
        client = app.test_client()
        if login:
            with client.session_transaction() as sess:
                sess["user_id"] = "u1"
                if company_id:
                    sess["company_id"] = company_id
        return client

    return _make
