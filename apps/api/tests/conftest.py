import pytest

from agenticv.config import Settings
from tests.helpers import FakeStorageClient, make_settings


@pytest.fixture()
def settings() -> Settings:
    return make_settings()


@pytest.fixture()
def fake_storage() -> FakeStorageClient:
    return FakeStorageClient()
