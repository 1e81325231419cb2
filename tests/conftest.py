"""Shared fixtures for the test suite.

No test touches the network or a real model: GitHub is replaced by
in-memory providers or httpx.MockTransport, the LLM by a fake chat model.
"""

import pytest

from llms_txt_rag.config.settings import Settings
from tests.fixtures.sample_data import RecordingChatModel, StubProvider

DEMO_SUMMARY = "# demo[https://github.com/acme/demo]\n\n> Demo service\n\n## File list\n- auth.py[src/auth.py]: Login handling"


@pytest.fixture
def settings():
    return Settings(
        github_token="ghp_test",
        organization="acme",
        llms_txt_repository="llms-txt",
        openai_api_key="sk-test",
        model_name="gpt-test",
    )


@pytest.fixture
def provider():
    return StubProvider({
        "llms-txt": {
            "demo/llms.txt": DEMO_SUMMARY,
            "README.md": "hosting repository",
        },
        "demo": {
            "src/auth.py": "def login():\n    return True\n",
            "README.md": "# demo\n",
        },
    })


@pytest.fixture
def chat_model_factory():
    def _make(*responses: str) -> RecordingChatModel:
        return RecordingChatModel(responses=list(responses))
    return _make
