import json
import pytest
from src.core.exceptions import StorageError
from src.utils.storage import (
    InMemoryTokenStore,
    FileTokenStore,
    ACCESS_TOKEN_KEY
)

@pytest.mark.asyncio
async def test_in_memory_store():
    store = InMemoryTokenStore({"other": "value"})
    assert await store.get(ACCESS_TOKEN_KEY) is None

    await store.set(ACCESS_TOKEN_KEY, "abc")
    await store.set(ACCESS_TOKEN_KEY, "def")

    assert await store.get(ACCESS_TOKEN_KEY) == "def"
    assert await store.get("other") == "value"

@pytest.mark.asyncio
async def test_file_store_persists_between_instances(tmp_path):
    path = tmp_path / "state" / "tokens.json"
    await FileTokenStore(path).set(ACCESS_TOKEN_KEY, "newtok")

    assert await FileTokenStore(path).get(ACCESS_TOKEN_KEY) == "newtok"
    assert json.loads(path.read_text()) == {"token": "newtok"}

@pytest.mark.asyncio
async def test_file_store_keeps_other_keys(tmp_path):
    path = tmp_path / "tokens.json"
    path.write_text(json.dumps({"theme": "dark", "token": "old"}))

    store = FileTokenStore(path)
    await store.set(ACCESS_TOKEN_KEY, "fresh")

    assert json.loads(path.read_text()) == {"theme": "dark", "token": "fresh"}

@pytest.mark.asyncio
async def test_file_store_missing_or_empty_file(tmp_path):
    path = tmp_path / "tokens.json"
    store = FileTokenStore(path)
    assert await store.get(ACCESS_TOKEN_KEY) is None

    path.write_text("")
    assert await store.get(ACCESS_TOKEN_KEY) is None

@pytest.mark.asyncio
async def test_file_store_rejects_corrupt_content(tmp_path):
    path = tmp_path / "tokens.json"
    path.write_text("not json")
    with pytest.raises(StorageError):
        await FileTokenStore(path).get(ACCESS_TOKEN_KEY)

    path.write_text("[1, 2]")
    with pytest.raises(StorageError):
        await FileTokenStore(path).set(ACCESS_TOKEN_KEY, "x")
