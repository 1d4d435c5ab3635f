import httpx
from fastapi.testclient import TestClient

from conftest import success_body

PREFIX = "/api/v1"
THIRTEEN = [chr(0x4E00 + i) for i in range(13)]


def provider(request):
    text = request.url.params["text"]
    if text == "hello":
        return httpx.Response(200, text=success_body("hello", THIRTEEN))
    if text == "nei":
        return httpx.Response(200, text=success_body("nei", ["呢", "尼", "妮", "匿", "你", "年"]))
    if text == "|學,zaap":
        return httpx.Response(200, text=success_body("zaap", ["習"]))
    if text == "boom":
        return httpx.Response(500)
    return httpx.Response(200, text='/*API*/cb(["FAILURE","quota exceeded"])')


def new_session(client):
    resp = client.post(f"{PREFIX}/sessions")
    assert resp.status_code == 201
    return resp.json()["session_id"]


def type_text(client, sid, text):
    resp = client.post(f"{PREFIX}/sessions/{sid}/input", json={"text": text, "wait": True})
    assert resp.status_code == 200
    return resp.json()["state"]


def test_health(make_app):
    with TestClient(make_app(provider)) as client:
        resp = client.get(f"{PREFIX}/health")
        assert resp.status_code == 200
        body = resp.json()
        assert body["ok"] is True
        assert body["sessions"] == 0
        assert "X-Request-Id" in resp.headers


def test_request_id_is_echoed(make_app):
    with TestClient(make_app(provider)) as client:
        resp = client.get(f"{PREFIX}/health", headers={"X-Request-Id": "abc"})
        assert resp.headers["X-Request-Id"] == "abc"


def test_suggest_pages(make_app):
    with TestClient(make_app(provider)) as client:
        resp = client.get(f"{PREFIX}/suggest", params={"q": "hello", "page": 5})
        assert resp.status_code == 200
        body = resp.json()
        assert body["query"] == "hello"
        assert body["current_page"] == 2
        assert body["total_pages"] == 3
        assert body["has_previous_page"] and not body["has_next_page"]
        assert body["candidates"] == [{"position": 1, "text": THIRTEEN[12]}]


def test_suggest_without_query_makes_no_request(make_app):
    calls = []

    def handler(request):
        calls.append(request)
        return provider(request)

    with TestClient(make_app(handler)) as client:
        body = client.get(f"{PREFIX}/suggest", params={"q": "你好12"}).json()
        assert body["retained"] == "你好"
        assert body["candidates"] == []
        assert calls == []


def test_suggest_errors_map_to_bad_gateway(make_app):
    with TestClient(make_app(provider)) as client:
        resp = client.get(f"{PREFIX}/suggest", params={"q": "boom"})
        assert resp.status_code == 502
        assert resp.json()["detail"] == "HTTP 500: Internal Server Error"

        resp = client.get(f"{PREFIX}/suggest", params={"q": "zzz"})
        assert resp.status_code == 502
        assert resp.json()["detail"] == "API returned status: FAILURE"


def test_session_typing_and_selection(make_app):
    with TestClient(make_app(provider)) as client:
        sid = new_session(client)
        state = type_text(client, sid, "nei")
        assert [c["text"] for c in state["candidates"]] == ["呢", "尼", "妮", "匿", "你", "年"]
        assert state["candidates"][4] == {"position": 5, "text": "你"}

        state = type_text(client, sid, "nei5")
        assert state["text"] == "你"
        assert state["candidates"] == []


def test_session_paging(make_app):
    with TestClient(make_app(provider)) as client:
        sid = new_session(client)
        type_text(client, sid, "hello")
        state = type_text(client, sid, "hello0")
        assert state["text"] == "hello"
        assert state["current_page"] == 1

        state = client.post(f"{PREFIX}/sessions/{sid}/next").json()["state"]
        assert state["current_page"] == 2
        state = client.post(f"{PREFIX}/sessions/{sid}/previous").json()["state"]
        assert state["current_page"] == 1


def test_session_select_endpoint(make_app):
    with TestClient(make_app(provider)) as client:
        sid = new_session(client)
        type_text(client, sid, "nei")
        resp = client.post(f"{PREFIX}/sessions/{sid}/select/2", params={"wait": True})
        assert resp.json()["state"]["text"] == "尼"

        resp = client.post(f"{PREFIX}/sessions/{sid}/select/1")
        assert resp.status_code == 409


def test_session_error_state(make_app):
    with TestClient(make_app(provider)) as client:
        sid = new_session(client)
        state = type_text(client, sid, "boom")
        assert state["error"] == "HTTP 500: Internal Server Error"
        assert state["candidates"] == []

        state = type_text(client, sid, "nei")
        assert state["error"] is None


def test_commit_converts_to_simplified(make_app):
    app = make_app(provider, SIMPLIFIED_CHINESE="true", COPY_MODE="copyPaste")
    with TestClient(app) as client:
        sid = new_session(client)
        type_text(client, sid, "學zaap")
        state = type_text(client, sid, "學zaap1")
        assert state["text"] == "學習"
        assert state["committed_text"] == "学习"

        body = client.get(f"{PREFIX}/sessions/{sid}/commit").json()
        assert body == {"text": "学习", "copy_mode": "copyPaste"}


def test_unknown_session(make_app):
    with TestClient(make_app(provider)) as client:
        assert client.get(f"{PREFIX}/sessions/missing").status_code == 404
        assert client.post(f"{PREFIX}/sessions/missing/input", json={"text": "a"}).status_code == 404


def test_delete_session(make_app):
    with TestClient(make_app(provider)) as client:
        sid = new_session(client)
        assert client.delete(f"{PREFIX}/sessions/{sid}").status_code == 204
        assert client.get(f"{PREFIX}/sessions/{sid}").status_code == 404


def test_oldest_session_is_evicted(make_app):
    with TestClient(make_app(provider, MAX_SESSIONS="2")) as client:
        first = new_session(client)
        new_session(client)
        new_session(client)
        assert client.get(f"{PREFIX}/sessions/{first}").status_code == 404
        assert client.get(f"{PREFIX}/health").json()["sessions"] == 2
