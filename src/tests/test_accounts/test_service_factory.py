import os
import pytest
from unittest.mock import MagicMock
from src.core.config import Config
from src.core.exceptions import ConfigError
from src.accounts import AccountService, create_account_service
from src.utils.storage import FileTokenStore, InMemoryTokenStore

@pytest.fixture(autouse=True)
def no_accounts_env(monkeypatch):
    for key in list(os.environ):
        if key.startswith("ACCOUNTS_"):
            monkeypatch.delenv(key)

def test_missing_base_url_is_a_config_error():
    with pytest.raises(ConfigError):
        create_account_service(Config())

def test_base_url_from_environment(monkeypatch, tmp_path):
    monkeypatch.setenv("ACCOUNTS_API_BASE_URL", "https://accounts.example.org/api")
    monkeypatch.setenv("ACCOUNTS_API_TIMEOUT", "3")
    monkeypatch.setenv("ACCOUNTS_STORAGE_TOKEN_FILE", str(tmp_path / "tokens.json"))

    service = create_account_service(Config())

    assert isinstance(service, AccountService)
    assert service.client.config.base_url == "https://accounts.example.org/api"
    assert service.client.config.timeout == 3
    assert isinstance(service.token_store, FileTokenStore)
    assert service.token_store.path == tmp_path / "tokens.json"
    assert str(service.client.build_url("/profile/")) == "https://accounts.example.org/api/profile/"

def test_injected_store_and_session():
    config = Config()
    config.set("api.base_url", "http://localhost:8000")
    store = InMemoryTokenStore()
    session = MagicMock()

    service = create_account_service(config, token_store=store, session=session)

    assert service.token_store is store
    assert service.client._session is session

@pytest.mark.asyncio
async def test_service_closes_owned_client():
    config = Config()
    config.set("api.base_url", "http://localhost:8000")

    async with create_account_service(config, token_store=InMemoryTokenStore()) as service:
        session = await service.client._get_session()
        assert not session.closed

    assert session.closed
