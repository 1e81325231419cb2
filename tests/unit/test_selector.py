"""Tests for candidate file selection."""

import asyncio
import json

import pytest

from llms_txt_rag.core.selector import CandidateSelector, build_corpus_context, parse_candidates
from llms_txt_rag.exceptions import CandidateParseError, ModelResponseMalformedError
from llms_txt_rag.models.rag_models import CandidateFile

DEMO_CONTEXT = "Repository name: demo\nRepository information:\n```\n# demo\n...\n```\n"
REQUEST = "How is authentication handled?"


def test_corpus_context_format():
    context = build_corpus_context([("demo", "# demo\n..."), ("api", "# api")])

    assert context == (
        "Repository name: demo\nRepository information:\n```\n# demo\n...\n```\n\n"
        "Repository name: api\nRepository information:\n```\n# api\n```"
    )


def test_corpus_context_japanese_labels():
    context = build_corpus_context([("demo", "# demo")], language="ja")
    assert context.startswith("リポジトリ名: demo\nリポジトリの情報:\n")


def test_empty_corpus():
    assert build_corpus_context([]) == ""


def test_prompt_embeds_summary_and_request_verbatim(chat_model_factory):
    model = chat_model_factory("<output>[]</output>")
    selector = CandidateSelector(model)

    candidates = asyncio.run(selector.select(REQUEST, DEMO_CONTEXT))

    assert candidates == []
    assert len(model.prompts) == 1
    assert DEMO_CONTEXT in model.prompts[0]
    assert REQUEST in model.prompts[0]
    assert model.prompts[0] == selector.build_prompt(REQUEST, DEMO_CONTEXT)


def test_empty_corpus_skips_model(chat_model_factory):
    model = chat_model_factory("<output>[]</output>")

    assert asyncio.run(CandidateSelector(model).select(REQUEST, "  \n")) == []
    assert model.prompts == []


def test_parses_candidates_in_model_order_keeping_duplicates(chat_model_factory):
    items = [
        {"reason": "login code", "repository_name": "demo", "file_path": "src/auth.py"},
        {"reason": "entry point", "repository_name": "demo", "file_path": "README.md"},
        {"reason": "login code", "repository_name": "demo", "file_path": "src/auth.py"},
    ]
    model = chat_model_factory(f"Here you go:\n<output>\n{json.dumps(items)}\n</output>")

    candidates = asyncio.run(CandidateSelector(model).select(REQUEST, DEMO_CONTEXT))

    assert [c.file_path for c in candidates] == ["src/auth.py", "README.md", "src/auth.py"]
    assert candidates[0] == CandidateFile(reason="login code", repository_name="demo", file_path="src/auth.py")


def test_missing_wrapper_yields_no_candidates(chat_model_factory):
    model = chat_model_factory('[{"reason": "r", "repository_name": "demo", "file_path": "a.py"}]')
    assert asyncio.run(CandidateSelector(model).select(REQUEST, DEMO_CONTEXT)) == []


def test_malformed_json_inside_wrapper_is_a_hard_failure(chat_model_factory):
    model = chat_model_factory("<output>[{'reason': oops}]</output>")

    with pytest.raises(CandidateParseError):
        asyncio.run(CandidateSelector(model).select(REQUEST, DEMO_CONTEXT))


def test_wrong_shape_is_a_hard_failure():
    with pytest.raises(ModelResponseMalformedError):
        parse_candidates('{"reason": "r", "repository_name": "demo", "file_path": "a.py"}')
    with pytest.raises(CandidateParseError):
        parse_candidates('[{"reason": "r"}]')


def test_candidate_json_round_trip():
    original = [
        CandidateFile(reason="why \"quoted\"", repository_name="demo", file_path="src/a b.py"),
        CandidateFile(reason="日本語の理由", repository_name="api", file_path="main.go"),
    ]
    serialized = json.dumps([c.model_dump() for c in original], ensure_ascii=False)

    assert parse_candidates(serialized) == original
