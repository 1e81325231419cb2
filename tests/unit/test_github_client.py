"""Tests for the GitHub REST client, with HTTP mocked by httpx.MockTransport."""

import asyncio
import base64
import json

import httpx
import pytest

from llms_txt_rag.core.github_client import GitHubClient, decode_file_content
from llms_txt_rag.exceptions import GitHubAPIError
from llms_txt_rag.models.rag_models import FileContent
from tests.fixtures.sample_data import dir_item, file_item


def make_client(handler):
    return GitHubClient("ghp_test", api_url="https://api.test", transport=httpx.MockTransport(handler))


def run(coro):
    return asyncio.run(coro)


def b64(text: str) -> str:
    return base64.b64encode(text.encode("utf-8")).decode("ascii")


# ---------------------------------------------------------------------------
# listing
# ---------------------------------------------------------------------------

TREE = {
    "": [file_item("README.md"), dir_item("src"), file_item("setup.py")],
    "src": [dir_item("src/pkg"), file_item("src/main.py")],
    "src/pkg": [file_item("src/pkg/__init__.py")],
}


def tree_handler(request: httpx.Request) -> httpx.Response:
    prefix = "/repos/acme/demo/contents/"
    path = request.url.path[len(prefix):]
    if path not in TREE:
        return httpx.Response(404, json={"message": "Not Found"})
    return httpx.Response(200, json=TREE[path])


def test_sends_token_and_accept_headers():
    seen = {}

    def handler(request):
        seen.update(request.headers)
        return httpx.Response(200, json=[])

    async def scenario():
        async with make_client(handler) as client:
            await client.list_directory("acme", "demo")

    run(scenario())
    assert seen["authorization"] == "token ghp_test"
    assert seen["accept"] == "application/vnd.github+json"


def test_recursive_listing_is_depth_first_preorder():
    async def scenario():
        async with make_client(tree_handler) as client:
            return await client.list_tree_recursive("acme", "demo")

    files = run(scenario())

    assert [f.path for f in files] == ["README.md", "src/pkg/__init__.py", "src/main.py", "setup.py"]
    assert all(f.type == "file" for f in files)


def test_failing_subtree_contributes_nothing():
    def handler(request):
        if request.url.path.endswith("/contents/src"):
            return httpx.Response(500, json={"message": "boom"})
        return tree_handler(request)

    async def scenario():
        async with make_client(handler) as client:
            return await client.list_tree_recursive("acme", "demo")

    assert [f.path for f in run(scenario())] == ["README.md", "setup.py"]


def test_skips_symlinks_and_submodules():
    def handler(request):
        return httpx.Response(200, json=[
            file_item("a.py"),
            {"name": "link", "path": "link", "type": "symlink"},
            {"name": "vendor", "path": "vendor", "type": "submodule"},
        ])

    async def scenario():
        async with make_client(handler) as client:
            return await client.list_directory("acme", "demo")

    assert [f.path for f in run(scenario())] == ["a.py"]


def test_organization_repositories_follow_pagination():
    pages = {
        "1": [{"name": f"repo{i}"} for i in range(100)],
        "2": [{"name": "last"}],
    }

    def handler(request):
        assert request.url.params["per_page"] == "100"
        return httpx.Response(200, json=pages[request.url.params["page"]])

    async def scenario():
        async with make_client(handler) as client:
            return await client.list_organization_repositories("acme")

    repos = run(scenario())
    assert len(repos) == 101
    assert repos[-1]["name"] == "last"


# ---------------------------------------------------------------------------
# file contents
# ---------------------------------------------------------------------------

def test_get_file_and_decode():
    def handler(request):
        return httpx.Response(200, json={"content": b64("print('hi')\n"), "encoding": "base64", "sha": "s1"})

    async def scenario():
        async with make_client(handler) as client:
            return await client.get_file("acme", "demo", "main.py")

    content = run(scenario())
    assert content.sha == "s1"
    assert decode_file_content(content) == "print('hi')\n"


def test_get_file_failure_returns_none():
    def handler(request):
        return httpx.Response(404, json={"message": "Not Found"})

    async def scenario():
        async with make_client(handler) as client:
            return await client.get_file("acme", "demo", "missing.py")

    assert run(scenario()) is None


def test_get_file_on_directory_returns_none():
    async def scenario():
        async with make_client(tree_handler) as client:
            return await client.get_file("acme", "demo", "src")

    assert run(scenario()) is None


def test_decode_degrades_to_empty_string():
    assert decode_file_content(None) == ""
    assert decode_file_content(FileContent(content="", encoding="none")) == ""
    assert decode_file_content(FileContent(content="a", encoding="base64")) == ""


def test_decode_keeps_github_line_breaks_in_base64():
    wrapped = b64("x" * 100)
    wrapped = wrapped[:60] + "\n" + wrapped[60:]
    assert decode_file_content(FileContent(content=wrapped, encoding="base64")) == "x" * 100


# ---------------------------------------------------------------------------
# write operations
# ---------------------------------------------------------------------------

def test_put_file_overwrites_existing_file_with_sha():
    requests = []

    def handler(request):
        requests.append(request)
        if request.method == "GET":
            assert request.url.params["ref"] == "llms-txt-20250101-000000"
            return httpx.Response(200, json={"sha": "old-sha", "content": "", "encoding": "base64"})
        return httpx.Response(200, json={"content": {}})

    async def scenario():
        async with make_client(handler) as client:
            await client.put_file("acme", "llms-txt", "llms-txt-20250101-000000", "demo/llms.txt",
                                  "# demo", "Update llms.txt")

    run(scenario())
    body = json.loads(requests[-1].content)
    assert requests[-1].method == "PUT"
    assert body["sha"] == "old-sha"
    assert body["branch"] == "llms-txt-20250101-000000"
    assert base64.b64decode(body["content"]).decode("utf-8") == "# demo"


def test_put_file_creates_new_file_without_sha():
    requests = []

    def handler(request):
        requests.append(request)
        if request.method == "GET":
            return httpx.Response(404, json={"message": "Not Found"})
        return httpx.Response(201, json={"content": {}})

    async def scenario():
        async with make_client(handler) as client:
            await client.put_file("acme", "llms-txt", "b", "demo/llms.txt", "# demo", "Update llms.txt")

    run(scenario())
    assert "sha" not in json.loads(requests[-1].content)


def test_write_failure_raises():
    def handler(request):
        return httpx.Response(422, json={"message": "Reference already exists"})

    async def scenario():
        async with make_client(handler) as client:
            await client.create_branch("acme", "llms-txt", "b", "abc")

    with pytest.raises(GitHubAPIError) as exc_info:
        run(scenario())
    assert exc_info.value.status_code == 422


def test_latest_commit_sha():
    def handler(request):
        assert request.url.path == "/repos/acme/llms-txt/git/ref/heads/main"
        return httpx.Response(200, json={"object": {"sha": "deadbeef"}})

    async def scenario():
        async with make_client(handler) as client:
            return await client.get_latest_commit_sha("acme", "llms-txt", "main")

    assert run(scenario()) == "deadbeef"


# ---------------------------------------------------------------------------
# non-JSON replies (e.g. an HTML page from a gateway)
# ---------------------------------------------------------------------------

def gateway_page(request):
    return httpx.Response(200, text="<html>gateway</html>", headers={"content-type": "text/html"})


def test_non_json_listing_degrades_to_empty():
    async def scenario():
        async with make_client(gateway_page) as client:
            return await client.list_tree_recursive("acme", "demo")

    assert run(scenario()) == []


def test_non_json_file_degrades_to_none():
    async def scenario():
        async with make_client(gateway_page) as client:
            return await client.get_file("acme", "demo", "README.md")

    assert run(scenario()) is None


def test_non_json_repository_page_keeps_earlier_pages():
    def handler(request):
        if request.url.params["page"] == "1":
            return httpx.Response(200, json=[{"name": f"repo{i}"} for i in range(100)])
        return gateway_page(request)

    async def scenario():
        async with make_client(handler) as client:
            return await client.list_organization_repositories("acme")

    assert len(run(scenario())) == 100
