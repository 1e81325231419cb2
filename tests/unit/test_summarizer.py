"""Tests for llms.txt synthesis."""

import asyncio

import pytest

from llms_txt_rag.core.selector import CandidateSelector
from llms_txt_rag.core.summarizer import LlmsTxtSummarizer
from llms_txt_rag.models.rag_models import FileEntry, RepositorySnapshot
from tests.fixtures.sample_data import file_item

LLMS_TXT = "# demo[https://github.com/acme/demo]\n\n> Demo\n\nDetails\n\n## File list\n- main.py[main.py]: entry"


def snapshot_of(*paths):
    return RepositorySnapshot.from_entries("demo", [FileEntry.model_validate(file_item(p)) for p in paths])


def test_prompt_lists_every_file_in_order(chat_model_factory):
    model = chat_model_factory(f"<output>\n{LLMS_TXT}\n</output>")
    summarizer = LlmsTxtSummarizer(model)
    snapshot = snapshot_of("main.py", "lib/util.py")

    document = asyncio.run(summarizer.synthesize(
        "demo", "https://github.com/acme/demo", snapshot,
        {"main.py": "print('main')", "lib/util.py": "def util(): ..."},
    ))

    prompt = model.prompts[0]
    assert "Repository name: demo" in prompt
    assert "Repository URL: https://github.com/acme/demo" in prompt
    assert "File name: util.py\nFile path: lib/util.py\nFile content:\n```\ndef util(): ...\n```" in prompt
    assert prompt.index("File path: main.py") < prompt.index("File path: lib/util.py")
    assert document.repository_name == "demo"
    assert document.content == LLMS_TXT
    assert document.path == "demo/llms.txt"


def test_unwrapped_response_is_kept_as_is(chat_model_factory):
    raw = "Sorry, here is the summary without tags:\n# demo"
    model = chat_model_factory(raw)

    document = asyncio.run(LlmsTxtSummarizer(model).synthesize("demo", "u", snapshot_of("a.py"), {}))

    assert document.content == raw


def test_unwrapped_response_diverges_between_summarizer_and_selector(chat_model_factory):
    raw = "[no wrapper at all]"

    document = asyncio.run(LlmsTxtSummarizer(chat_model_factory(raw)).synthesize("demo", "u", snapshot_of("a.py"), {}))
    candidates = asyncio.run(CandidateSelector(chat_model_factory(raw)).select("q", "Repository name: demo"))

    assert document.content == raw
    assert candidates == []


def test_synthesize_repository_fetches_through_provider(chat_model_factory, provider):
    model = chat_model_factory("<output>ok</output>")
    summarizer = LlmsTxtSummarizer(model, provider=provider)
    snapshot = RepositorySnapshot.from_entries(
        "demo", asyncio.run(provider.list_tree_recursive("acme", "demo"))
    )

    document = asyncio.run(summarizer.synthesize_repository("acme", "https://github.com/acme/demo", snapshot))

    assert document.content == "ok"
    assert provider.fetched == ["demo/src/auth.py", "demo/README.md"]
    assert "def login():" in model.prompts[0]


def test_japanese_prompt(chat_model_factory):
    model = chat_model_factory("<output>ok</output>")
    asyncio.run(LlmsTxtSummarizer(model, language="ja").synthesize("demo", "u", snapshot_of("a.py"), {"a.py": "x"}))

    assert "レポジトリ名: demo" in model.prompts[0]
    assert "ファイルパス: a.py" in model.prompts[0]


def test_snapshot_rejects_directories():
    with pytest.raises(ValueError):
        RepositorySnapshot.from_entries("demo", [FileEntry(name="src", path="src", type="dir")])
