"""
Sandcraft - Test Configuration and Fixtures
"""
import os

import pytest

# Set testing environment before settings are loaded
os.environ['ENVIRONMENT'] = 'testing'
os.environ['LOG_LEVEL'] = 'DEBUG'
os.environ['LOG_FILE'] = ''
os.environ['PRIMARY_AI_PROVIDER'] = 'groq'
os.environ['FALLBACK_AI_PROVIDER'] = 'gemini'

from sandcraft.models.generated_file import GeneratedFile, Language
from sandcraft.utils.file_templates import ENTRY_BOOTSTRAP, INDEX_CSS, INDEX_HTML, default_manifest
from mocks.fake_providers import FakeProvider
from mocks.llm_responses import (
    ANNOTATED_COUNTER_RESPONSE,
    BARE_BLOCKS_RESPONSE,
    BOLD_PATH_RESPONSE,
    COUNTER_APP,
    FULL_PROJECT_RESPONSE,
    HTML_ATTRIBUTES_RESPONSE,
    INVALID_MANIFEST_RESPONSE,
    UNBALANCED_RESPONSE,
)


@pytest.fixture
def annotated_counter_response() -> str:
    return ANNOTATED_COUNTER_RESPONSE


@pytest.fixture
def full_project_response() -> str:
    return FULL_PROJECT_RESPONSE


@pytest.fixture
def bold_path_response() -> str:
    return BOLD_PATH_RESPONSE


@pytest.fixture
def bare_blocks_response() -> str:
    return BARE_BLOCKS_RESPONSE


@pytest.fixture
def html_attributes_response() -> str:
    return HTML_ATTRIBUTES_RESPONSE


@pytest.fixture
def invalid_manifest_response() -> str:
    return INVALID_MANIFEST_RESPONSE


@pytest.fixture
def unbalanced_response() -> str:
    return UNBALANCED_RESPONSE


@pytest.fixture
def complete_project_files() -> list:
    """The five essential files, all valid"""
    return [
        GeneratedFile("/package.json", default_manifest(), Language.JSON),
        GeneratedFile("/public/index.html", INDEX_HTML, Language.HTML),
        GeneratedFile("/src/index.css", INDEX_CSS, Language.CSS),
        GeneratedFile("/src/index.js", ENTRY_BOOTSTRAP, Language.JAVASCRIPT),
        GeneratedFile("/src/App.js", COUNTER_APP, Language.JAVASCRIPT),
    ]


@pytest.fixture
def fake_primary() -> FakeProvider:
    return FakeProvider(name="primary", responses=[FULL_PROJECT_RESPONSE])


@pytest.fixture
def fake_fallback() -> FakeProvider:
    return FakeProvider(name="fallback", responses=[ANNOTATED_COUNTER_RESPONSE])
