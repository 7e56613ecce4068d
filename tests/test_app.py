import os
import threading
import time

import pytest

import app as app_module
import progress
from config import CFG


@pytest.fixture
def client(tmp_path, monkeypatch):
    monkeypatch.setattr(app_module, "BASE_DIR", str(tmp_path))
    monkeypatch.setattr(progress, "STATE_FILE", tmp_path / "state.json")
    monkeypatch.setattr(progress, "STATE_FILE_TMP", tmp_path / "state.json.tmp")
    app_module.app.config["TESTING"] = True
    yield app_module.app.test_client()
    app_module.RUN["abort"].set()
    _join()


def _join(timeout=10.0):
    th = app_module.RUN["thread"]
    if th is not None:
        th.join(timeout)
        assert not th.is_alive()


def test_solve_small_board_end_to_end(client):
    resp = client.post("/solve", json={"board_size": 2, "pieces": ["XX\nXX"]})
    assert resp.status_code == 202
    assert resp.get_json()["ok"] is True
    _join()

    resp = client.get("/progress3")
    assert resp.headers["Cache-Control"] == "no-store, max-age=0"
    snap = resp.get_json()
    assert snap["status"] == "Solved"
    assert snap["solutions"] == 1
    assert snap["done"] is True
    assert snap["board_size"] == 2

    resp = client.get("/solutions/1")
    assert resp.status_code == 200
    assert resp.get_data(as_text=True) == "000001 000001\n000001 000001\n"

    resp = client.get("/result/latest")
    assert resp.status_code == 200
    body = resp.get_data(as_text=True)
    assert "<svg" in body
    assert "Solution 1" in body

    resp = client.get("/download/html")
    assert resp.status_code == 200


@pytest.mark.parametrize(
    "payload",
    [
        {"board_size": 2, "pieces": ["XX\nX"]},
        {"board_size": "abc"},
        {"board_size": 0},
        {"pieces": "XX"},
    ],
)
def test_solve_rejects_bad_configuration(client, payload):
    resp = client.post("/solve", json=payload)
    assert resp.status_code == 400
    body = resp.get_json()
    assert body["ok"] is False
    assert body["error"]


def test_second_solve_is_refused_until_abort(client, monkeypatch):
    monkeypatch.setattr(CFG, "BOARD_SIZE", 8)
    resp = client.post("/solve")
    assert resp.status_code == 202

    resp = client.post("/solve")
    assert resp.status_code == 409

    resp = client.post("/abort")
    assert resp.status_code == 200
    _join()

    snap = client.get("/progress3").get_json()
    assert snap["status"] == "Aborted"
    assert snap["done"] is True
    assert snap["pieces"] == 11


def test_missing_results_are_404(client, monkeypatch):
    monkeypatch.setitem(app_module.RUN, "latest", None)
    assert client.get("/solutions/42").status_code == 404
    assert client.get("/result/latest").status_code == 404


def test_index_page_shows_status(client):
    resp = client.get("/")
    assert resp.status_code == 200
    assert "Polyomino packer" in resp.get_data(as_text=True)


def test_concurrent_solves_start_exactly_one_search(client, monkeypatch):
    monkeypatch.setattr(CFG, "BOARD_SIZE", 8)
    real_context = app_module.SearchContext

    def _slow_context(*args, **kwargs):
        time.sleep(0.3)
        return real_context(*args, **kwargs)

    monkeypatch.setattr(app_module, "SearchContext", _slow_context)

    codes = []
    barrier = threading.Barrier(2)

    def _post():
        c = app_module.app.test_client()
        barrier.wait()
        codes.append(c.post("/solve").status_code)

    workers = [threading.Thread(target=_post) for _ in range(2)]
    for w in workers:
        w.start()
    for w in workers:
        w.join(10.0)

    assert sorted(codes) == [202, 409]

    resp = client.post("/abort")
    assert resp.status_code == 200
    _join()
    assert client.get("/progress3").get_json()["status"] == "Aborted"


def test_new_run_does_not_serve_solutions_from_the_previous_one(client, tmp_path):
    resp = client.post("/solve", json={"board_size": 2, "pieces": ["XX", "XX"]})
    assert resp.status_code == 202
    _join()
    assert client.get("/progress3").get_json()["solutions"] == 4
    assert client.get("/solutions/3").status_code == 200

    resp = client.post("/solve", json={"board_size": 2, "pieces": ["XX\nXX"]})
    assert resp.status_code == 202
    _join()
    assert client.get("/progress3").get_json()["solutions"] == 1

    assert client.get("/solutions/3").status_code == 404
    assert client.get("/solutions/1").get_data(as_text=True) == "000001 000001\n000001 000001\n"
    assert sorted(os.listdir(tmp_path / "solutions")) == ["01.txt"]
