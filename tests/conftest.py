from __future__ import annotations

from collections.abc import Iterator

import pytest
from _stubs import FakeClock, StubSource
from healthwatch.config import Settings, get_settings


@pytest.fixture(autouse=True)
def _clear_settings_cache() -> Iterator[None]:
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def settings() -> Settings:
    return Settings(base_url="http://test.local/actuator/")


@pytest.fixture
def fake_clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def stub_source() -> StubSource:
    return StubSource()
