import pytest

from credentials.models import TokenPair
from credentials.token_store import FileTokenStore, MemoryTokenStore


@pytest.mark.asyncio
async def test_memory_store_save_load() -> None:
    store = MemoryTokenStore()
    payload = TokenPair("access", "refresh", 1234.0)

    await store.save(payload)

    assert await store.load() == payload


@pytest.mark.asyncio
async def test_memory_store_empty() -> None:
    assert await MemoryTokenStore().load() is None


@pytest.mark.asyncio
async def test_memory_store_clear() -> None:
    store = MemoryTokenStore(TokenPair("access", "refresh", 1234.0))

    await store.clear()

    assert await store.load() is None


@pytest.mark.asyncio
async def test_file_store_save_load(tmp_path) -> None:
    store = FileTokenStore(tmp_path / "tokens.json")
    payload = TokenPair("access", "refresh", 1234.0)

    await store.save(payload)

    assert await store.load() == payload


@pytest.mark.asyncio
async def test_file_store_without_refresh_token(tmp_path) -> None:
    store = FileTokenStore(tmp_path / "tokens.json")
    payload = TokenPair("access", None, 1234.0)

    await store.save(payload)

    assert await store.load() == payload


@pytest.mark.asyncio
async def test_file_store_persists(tmp_path) -> None:
    path = tmp_path / "tokens.json"
    payload = TokenPair("access", "refresh", 1234.0)

    await FileTokenStore(path).save(payload)

    assert await FileTokenStore(path).load() == payload


@pytest.mark.asyncio
async def test_file_store_overwrites(tmp_path) -> None:
    store = FileTokenStore(tmp_path / "tokens.json")
    await store.save(TokenPair("access-1", "refresh-1", 1.0))

    await store.save(TokenPair("access-2", "refresh-1", 2.0))

    assert await store.load() == TokenPair("access-2", "refresh-1", 2.0)
    assert [p.name for p in tmp_path.iterdir()] == ["tokens.json"]


@pytest.mark.asyncio
async def test_file_store_clear(tmp_path) -> None:
    store = FileTokenStore(tmp_path / "tokens.json")
    await store.save(TokenPair("access", "refresh", 1234.0))

    await store.clear()
    await store.clear()

    assert await store.load() is None


@pytest.mark.asyncio
async def test_file_store_missing_file(tmp_path) -> None:
    assert await FileTokenStore(tmp_path / "missing.json").load() is None


@pytest.mark.asyncio
async def test_file_store_rejects_invalid_file(tmp_path) -> None:
    path = tmp_path / "tokens.json"
    path.write_text("[]", encoding="utf-8")

    with pytest.raises(RuntimeError, match="Token store file is invalid"):
        await FileTokenStore(path).load()
