"""Pytest configuration and fixtures."""

import os

import pytest

from app.core.assessment_scoring.types import TemplateConfig
from tests.fixtures_assessment import TEMPLATE_CONFIG


@pytest.fixture(scope="session", autouse=True)
def setup_test_env():
    """Set up test environment variables."""
    os.environ["SUPABASE_URL"] = "https://test.supabase.co"
    os.environ["SUPABASE_SERVICE_ROLE_KEY"] = "test-key"
    os.environ["ASSESSMENT_ENGINE_ENV"] = "test"


@pytest.fixture
def template() -> TemplateConfig:
    """The four-competency leadership template used across scoring tests."""
    return TemplateConfig.model_validate(TEMPLATE_CONFIG)
