from __future__ import annotations

from typing import Any

from sqlalchemy.engine import URL
from sqlalchemy.engine.default import DefaultDialect

from . import dbapi, driver

_TRUE = {"1", "true", "yes", "on"}


def _parse_flag(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, (tuple, list)):
        value = value[-1]
    flag = str(value).strip().lower()
    if flag in _TRUE:
        return True
    if flag in {"0", "false", "no", "off", ""}:
        return False
    raise ValueError(f"time_parsing must be a boolean flag, got {value!r}")


class StubDialect(DefaultDialect):
    """
    SQLAlchemy dialect backed by the in-memory stub driver.

    Every engine created with a ``stubdb://`` URL talks to
    ``stubdb.driver.default_driver``; statements are answered by whatever the
    test stubbed. SQL compilation is SQLAlchemy's generic default.

    Optional URL query params:
    - time_parsing: enable timestamp parsing for ``rows_from_csv_string``
    - time_format: strftime format used when parsing (percent-encoded in the URL)
    """

    name = "stubdb"
    driver = "stubdb"
    supports_statement_cache = True
    default_paramstyle = "qmark"

    @classmethod
    def import_dbapi(cls):
        return dbapi

    def create_connect_args(self, url: URL):
        # Pull our custom options from the query string; whatever remains is
        # handed to connect() as the DSN.
        q = dict(url.query)

        time_parsing = q.pop("time_parsing", None)
        time_format = q.pop("time_format", None)

        if isinstance(time_format, (tuple, list)):
            time_format = time_format[-1]
        if time_format:
            driver.default_driver.enable_time_parsing_with_format(str(time_format))
        if time_parsing is not None:
            driver.default_driver.enable_time_parsing(_parse_flag(time_parsing))

        url = url.set(query=q)
        return [url.render_as_string(hide_password=False)], {}

    def do_ping(self, dbapi_connection) -> bool:
        # The default ping runs SELECT 1, which would consume or miss stubs.
        return True
