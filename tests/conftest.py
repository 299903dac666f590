from __future__ import annotations

import sys
from pathlib import Path

import pytest

# Ensure the repository root is importable (so `import stubdb` works without
# an installed package).
REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from stubdb.driver import StubDriver, default_driver as _default_driver  # noqa: E402


@pytest.fixture()
def driver():
    """A private driver, isolated from the process-wide default."""
    return StubDriver()


@pytest.fixture()
def default_driver():
    """The process-wide driver, reset around the test.

    reset() keeps time parsing settings, so those are restored explicitly.
    """
    saved = (_default_driver.time_parsing, _default_driver.time_format)
    _default_driver.reset()
    yield _default_driver
    _default_driver.reset()
    _default_driver.time_parsing, _default_driver.time_format = saved


@pytest.fixture()
def users_rows(driver):
    return driver.rows_from_csv_string(["id", "name"], "1,tim\n2,joe")
