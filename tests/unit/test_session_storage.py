"""Unit tests for session storage implementations."""

from pathlib import Path

import pytest

from restaurant_storefront.services.session_storage import (
    AUTH_TOKEN_KEY,
    InMemorySessionStorage,
    JsonFileSessionStorage,
)


@pytest.mark.unit
class TestInMemorySessionStorage:
    """Test suite for InMemorySessionStorage."""

    def test_set_get_remove(self) -> None:
        """Test the basic key/value lifecycle."""
        storage = InMemorySessionStorage()
        storage.set_item(AUTH_TOKEN_KEY, "abc")

        assert storage.get_item(AUTH_TOKEN_KEY) == "abc"

        storage.remove_item(AUTH_TOKEN_KEY)
        assert storage.get_item(AUTH_TOKEN_KEY) is None

    def test_remove_missing_key_is_noop(self) -> None:
        """Test that removing an absent key does nothing."""
        storage = InMemorySessionStorage()
        storage.remove_item("missing")

        assert storage.get_item("missing") is None


@pytest.mark.unit
class TestJsonFileSessionStorage:
    """Test suite for JsonFileSessionStorage."""

    def test_values_survive_new_instance(self, tmp_path: Path) -> None:
        """Test that values are readable by a fresh instance on the same file."""
        path = tmp_path / "session" / "storage.json"
        JsonFileSessionStorage(path).set_item(AUTH_TOKEN_KEY, "abc")

        assert JsonFileSessionStorage(path).get_item(AUTH_TOKEN_KEY) == "abc"

    def test_missing_file_reads_as_empty(self, tmp_path: Path) -> None:
        """Test that a nonexistent file behaves like empty storage."""
        storage = JsonFileSessionStorage(tmp_path / "nope.json")

        assert storage.get_item(AUTH_TOKEN_KEY) is None

    def test_corrupt_file_reads_as_empty(self, tmp_path: Path) -> None:
        """Test that an unreadable file is ignored."""
        path = tmp_path / "storage.json"
        path.write_text("{not json", encoding="utf-8")

        assert JsonFileSessionStorage(path).get_item(AUTH_TOKEN_KEY) is None

    def test_remove_item(self, tmp_path: Path) -> None:
        """Test that removed keys are gone from the file."""
        path = tmp_path / "storage.json"
        storage = JsonFileSessionStorage(path)
        storage.set_item(AUTH_TOKEN_KEY, "abc")
        storage.set_item("other", "keep")

        storage.remove_item(AUTH_TOKEN_KEY)

        assert storage.get_item(AUTH_TOKEN_KEY) is None
        assert storage.get_item("other") == "keep"
