from __future__ import annotations

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from simmetrics.common.config import Settings, get_settings
from simmetrics.main import create_app


@pytest.fixture(autouse=True)
def clear_settings_cache():
    get_settings.cache_clear()  # type: ignore[attr-defined]
    yield
    get_settings.cache_clear()  # type: ignore[attr-defined]


@pytest.fixture
def settings() -> Settings:
    return Settings(SAMPLE_INTERVAL_SECONDS=0.05, DEFAULT_PROCESS_METRICS=False)


@pytest.fixture
def app(settings: Settings) -> FastAPI:
    # 每个测试都构建独立的 app，指标注册表不会在测试之间累积
    return create_app(settings)


@pytest.fixture
def client(app: FastAPI):
    with TestClient(app) as test_client:
        yield test_client
