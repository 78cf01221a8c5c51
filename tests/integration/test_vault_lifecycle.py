"""Integration tests for the stored connection settings lifecycle.

Tests: save → reopen → update → change passphrase → forget
"""

import json
from pathlib import Path

from sqlpad.core.preference_store import JsonPreferenceStore, preference_key
from sqlpad.core.vault import CredentialVault
from sqlpad.models.connection import ConnectionConfig

ITERATIONS = 1000


def _vault(path: Path, passphrase: str = "/opt/sqlpad/install", install_dir: str | None = None):
    key = preference_key(install_dir) if install_dir else None
    return CredentialVault(
        JsonPreferenceStore(path), passphrase, storage_key=key, iterations=ITERATIONS
    )


class TestVaultLifecycle:
    """Test the complete persistence lifecycle."""

    def test_complete_lifecycle(self, tmp_path: Path) -> None:
        path = tmp_path / "prefs.json"
        first = ConnectionConfig(
            connection_string="Server=db; UserID=app; Password=pw;", query_text="SELECT 1;"
        )

        # Step 1: save and reopen
        _vault(path).save(first)
        assert _vault(path).load() == first

        # Step 2: update overwrites
        second = first.model_copy(update={"query_text": "SELECT 2;"})
        _vault(path).save(second)
        assert _vault(path).load() == second
        assert len(json.loads(path.read_text(encoding="utf-8"))) == 1

        # Step 3: another passphrase cannot read it
        assert _vault(path, passphrase="/other/install").load() == ConnectionConfig()

        # Step 4: forget
        _vault(path).forget()
        assert _vault(path).load() == ConnectionConfig()

    def test_installations_use_separate_keys(self, tmp_path: Path) -> None:
        path = tmp_path / "prefs.json"
        one = _vault(path, "/opt/one", install_dir="/opt/one")
        two = _vault(path, "/opt/two", install_dir="/opt/two")

        one.save(ConnectionConfig(query_text="SELECT 'one';"))
        two.save(ConnectionConfig(query_text="SELECT 'two';"))

        assert one.load().query_text == "SELECT 'one';"
        assert two.load().query_text == "SELECT 'two';"
        assert len(json.loads(path.read_text(encoding="utf-8"))) == 2

    def test_corrupted_file_recovers_on_next_save(self, tmp_path: Path) -> None:
        path = tmp_path / "prefs.json"
        path.write_text("not json at all", encoding="utf-8")
        vault = _vault(path)

        assert vault.load() == ConnectionConfig()

        vault.save(ConnectionConfig(query_text="SELECT 3;"))
        assert _vault(path).load().query_text == "SELECT 3;"
