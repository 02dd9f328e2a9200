"""Root conftest.py for test configuration.

Ensures local src/ directory takes priority over any installed packages,
and provides the store fixtures shared by most tests.
"""

import sys
from collections.abc import Generator
from pathlib import Path

import pytest

# Insert local src directory at the beginning of sys.path
# This ensures that the local refdocs package is used, not any installed one
_src_dir = Path(__file__).parent.parent / "src"
if str(_src_dir) not in sys.path:
    sys.path.insert(0, str(_src_dir))

from refdocs.store import Database, SqlStore  # noqa: E402


@pytest.fixture
def db(tmp_path: Path) -> Generator[Database, None, None]:
    """Temporary database with schema."""
    database = Database(tmp_path / "refdocs.db")
    database.create_all()
    yield database
    database.engine.dispose()


@pytest.fixture
def store(db: Database) -> SqlStore:
    """Store with an authenticated actor."""
    sql_store = SqlStore(db, actor_login="admin")
    sql_store.add_user("admin")
    return sql_store
