import asyncio

import pytest
from aiohttp import web
from aiohttp.test_utils import TestServer, unused_port

from client.api import ApiError, DashboardApiClient


def _build_app(seen):
    async def list_tasks(request):
        seen.append(("GET", request.headers.get("Authorization")))
        if request.headers.get("Authorization") != "Bearer good":
            return web.json_response({"error": "unauthorized"}, status=401)
        return web.json_response([
            {"id": 2, "user_id": "alice", "title": "b", "done": True, "created_at": 7},
        ])

    async def create_task(request):
        body = await request.json()
        seen.append(("POST", body))
        if not body.get("title"):
            return web.json_response({"error": "title required"}, status=400)
        return web.json_response({"id": 3, "user_id": "alice", "title": body["title"],
                                  "done": False, "created_at": 9})

    async def update_task(request):
        seen.append(("PUT", await request.json()))
        return web.json_response({"ok": True})

    async def delete_task(request):
        seen.append(("DELETE", dict(request.query)))
        return web.json_response({"ok": True})

    async def list_events(request):
        return web.Response(text="<html>proxy error</html>", content_type="text/html")

    async def get_settings(request):
        return web.json_response({"error": "storage unavailable"}, status=503)

    async def save_settings(request):
        return web.Response(status=502, text="bad gateway")

    async def sign_out(request):
        await asyncio.sleep(0.5)
        return web.json_response({"ok": True})

    app = web.Application()
    app.router.add_get("/api/tasks", list_tasks)
    app.router.add_post("/api/tasks", create_task)
    app.router.add_put("/api/tasks", update_task)
    app.router.add_delete("/api/tasks", delete_task)
    app.router.add_get("/api/events", list_events)
    app.router.add_get("/api/settings", get_settings)
    app.router.add_post("/api/settings", save_settings)
    app.router.add_post("/api/sign-out", sign_out)
    return app


def _run(scenario, token="good", timeout=5.0):
    seen = []

    async def wrapper():
        async with TestServer(_build_app(seen)) as server:
            async with DashboardApiClient(str(server.make_url("/")), token=token, timeout=timeout) as api:
                return await scenario(api)

    return asyncio.run(wrapper()), seen


def _error_of(call, **kwargs):
    async def scenario(api):
        with pytest.raises(ApiError) as exc_info:
            await call(api)
        return exc_info.value

    error, _ = _run(scenario, **kwargs)
    return error


def test_records_are_decoded():
    async def scenario(api):
        return await api.list_tasks(), await api.create_task("write")

    (tasks, created), seen = _run(scenario)
    assert [(t.id, t.title, t.done) for t in tasks] == [(2, "b", True)]
    assert (created.id, created.title, created.done) == (3, "write", False)
    assert ("GET", "Bearer good") in seen


def test_patch_and_delete_send_ids():
    async def scenario(api):
        await api.update_task(4, done=True)
        await api.delete_task(4)

    _, seen = _run(scenario)
    assert ("PUT", {"id": 4, "done": True}) in seen
    assert ("DELETE", {"id": "4"}) in seen


def test_unauthorized_body_becomes_api_error():
    error = _error_of(lambda api: api.list_tasks(), token="bad")
    assert error.status == 401
    assert error.message == "unauthorized"
    assert error.unauthenticated
    assert not error.transient


def test_validation_error_is_not_transient():
    error = _error_of(lambda api: api.create_task(""))
    assert (error.status, error.message) == (400, "title required")
    assert not error.transient


def test_server_errors_are_transient():
    error = _error_of(lambda api: api.get_settings())
    assert (error.status, error.message) == (503, "storage unavailable")
    assert error.transient

    error = _error_of(lambda api: api.save_settings("#000000", False))
    assert error.status == 502
    assert error.message == "invalid JSON response"
    assert error.transient


def test_non_json_body_is_reported():
    error = _error_of(lambda api: api.list_events())
    assert error.status == 200
    assert error.message == "invalid JSON response"


def test_timeout_maps_to_status_zero():
    error = _error_of(lambda api: api.sign_out(), timeout=0.05)
    assert error.status == 0
    assert error.transient


def test_refused_connection_maps_to_status_zero():
    async def scenario():
        async with DashboardApiClient(f"http://127.0.0.1:{unused_port()}", token="good") as api:
            with pytest.raises(ApiError) as exc_info:
                await api.list_tasks()
            return exc_info.value

    error = asyncio.run(scenario())
    assert error.status == 0
    assert error.transient
