import json
import os
from unittest import mock

import pytest
from aiohttp import web
from aiohttp.test_utils import TestClient, TestServer

from linkstatus.app import create_app, main, run
from linkstatus.repository import HASH_TO_LINK_NUM_FILE, LINK_NUM_TO_LINKS_FILE


class RecordingHandler:
    def __init__(self):
        self.calls = []

    async def get_status(self, request):
        self.calls.append(("get_status", await request.text()))
        return web.Response(text="status")

    async def build_pdf(self, request):
        self.calls.append(("build_pdf", await request.text()))
        return web.Response(text="pdf")


@pytest.mark.asyncio
async def test_routes_dispatch_to_handler():
    handler = RecordingHandler()
    async with TestClient(TestServer(create_app(handler))) as client:
        status_resp = await client.post("/links/get_status", data=b"one")
        pdf_resp = await client.post("/links/pdf", data=b"two")
        assert await status_resp.text() == "status"
        assert await pdf_resp.text() == "pdf"
    assert handler.calls == [("get_status", "one"), ("build_pdf", "two")]


@pytest.mark.asyncio
async def test_routes_accept_only_post():
    handler = RecordingHandler()
    async with TestClient(TestServer(create_app(handler))) as client:
        resp = await client.get("/links/get_status")
        assert resp.status == 405
    assert handler.calls == []


def test_run_persists_data_after_serving(tmp_path):
    with mock.patch("aiohttp.web.run_app") as run_app:
        run(data_dir=tmp_path, port=9999)
    run_app.assert_called_once()
    assert run_app.call_args.kwargs["port"] == 9999
    assert json.loads((tmp_path / HASH_TO_LINK_NUM_FILE).read_text()) == {}
    assert json.loads((tmp_path / LINK_NUM_TO_LINKS_FILE).read_text()) == {}


def test_run_round_trips_stored_link_sets(tmp_path):
    (tmp_path / LINK_NUM_TO_LINKS_FILE).write_text(json.dumps({"3": ["a.com", "b.com"]}))
    with mock.patch("aiohttp.web.run_app"):
        run(data_dir=tmp_path, port=9999)
    stored = json.loads((tmp_path / LINK_NUM_TO_LINKS_FILE).read_text())
    assert stored == {"3": ["a.com", "b.com"]}


def test_run_takes_port_from_environment(tmp_path):
    with mock.patch.dict(os.environ, {"APP_PORT": "9191"}), \
            mock.patch("aiohttp.web.run_app") as run_app:
        run(data_dir=tmp_path)
    assert run_app.call_args.kwargs["port"] == 9191
    assert json.loads((tmp_path / HASH_TO_LINK_NUM_FILE).read_text()) == {}
    assert json.loads((tmp_path / LINK_NUM_TO_LINKS_FILE).read_text()) == {}


def test_run_raises_on_corrupt_data(tmp_path):
    (tmp_path / HASH_TO_LINK_NUM_FILE).write_text("{not json")
    with mock.patch("aiohttp.web.run_app") as run_app:
        with pytest.raises(ValueError, match="hash_to_link_num"):
            run(data_dir=tmp_path, port=9999)
    run_app.assert_not_called()


def test_main_fails_on_corrupt_data(tmp_path):
    (tmp_path / LINK_NUM_TO_LINKS_FILE).write_text("[")
    with mock.patch("aiohttp.web.run_app") as run_app:
        assert main(["--data-dir", str(tmp_path)]) == 1
    run_app.assert_not_called()


def test_main_succeeds(tmp_path):
    with mock.patch("aiohttp.web.run_app") as run_app:
        assert main(["--data-dir", str(tmp_path)]) == 0
    run_app.assert_called_once()
    assert (tmp_path / HASH_TO_LINK_NUM_FILE).exists()