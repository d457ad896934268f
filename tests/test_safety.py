"""Guards against tests writing into the working tree.

The only shipped data file is data/config/registrar_v1.yaml. Every test
database lives in memory or under tmp_path.
"""

import hashlib
from pathlib import Path

import pytest

SHIPPED_CONFIG = Path("data/config/registrar_v1.yaml")
SQLITE_SUFFIXES = (".db", ".sqlite", ".sqlite3")


def _digest(path: Path) -> str:
    return hashlib.sha256(path.read_bytes()).hexdigest()


def _stray_databases() -> set[Path]:
    """SQLite files in the project root or under data/."""
    found = {p for p in Path(".").iterdir() if p.suffix in SQLITE_SUFFIXES}
    if Path("data").exists():
        found |= {p for p in Path("data").rglob("*") if p.suffix in SQLITE_SUFFIXES}
    return found


# Taken at collection time, before any test runs
TREE_BEFORE = {
    "config": _digest(SHIPPED_CONFIG) if SHIPPED_CONFIG.exists() else None,
    "databases": _stray_databases(),
}


class TestWorkingTreeUntouched:
    """Tests that the suite leaves the checkout as it found it."""

    def test_shipped_config_unchanged(self):
        """data/config/registrar_v1.yaml is read, never rewritten."""
        if TREE_BEFORE["config"] is None:
            pytest.skip("no shipped config in this checkout")
        assert _digest(SHIPPED_CONFIG) == TREE_BEFORE["config"]

    def test_no_database_files_created(self):
        """--database and ConnectionManager paths in tests point into tmp_path."""
        created = _stray_databases() - TREE_BEFORE["databases"]
        assert not created, f"Tests created database files: {sorted(map(str, created))}"

    def test_file_database_tests_use_tmp_path(self):
        """Any test module naming a .db file also uses tmp_path."""
        offenders = [
            str(path)
            for path in sorted(Path("tests").glob("f*/test_*.py"))
            if ".db\"" in path.read_text() and "tmp_path" not in path.read_text()
        ]
        assert not offenders, f"Opens a database file outside tmp_path: {offenders}"
