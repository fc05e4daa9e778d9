import asyncio
import ssl
import unittest

from aiohttp import web
from aiohttp.test_utils import TestServer

from rest_describe import (
    AiohttpTransport,
    CallResult,
    Configuration,
    HttpStatusFailed,
    RestClient,
    TokenAcquisitionFailed,
    TransportFailed,
)
from rest_describe.models import FORM_MIME_TYPE, HTTPMethod, WireRequest


async def token(request: web.Request) -> web.Response:
    payload = await request.json()
    if payload.get("client_secret") != "client-secret":
        return web.json_response({"message": "invalid_client"}, status=401)
    return web.json_response({"access_token": "live-token", "refresh_token": "live-refresh"})


async def get_user(request: web.Request) -> web.Response:
    return web.json_response({
        "id": request.match_info["id"],
        "query": dict(request.query),
        "user_agent": request.headers.get("User-Agent"),
    })


async def create_user(request: web.Request) -> web.Response:
    return web.json_response({"created": await request.json(), "content_type": request.content_type}, status=201)


async def search(request: web.Request) -> web.Response:
    return web.json_response({"ids": request.query.getall("ids", []), "filter": request.query.get("filter")})


async def submit_form(request: web.Request) -> web.Response:
    form = await request.post()
    return web.json_response({"form": dict(form), "content_type": request.content_type})


async def plain_text(request: web.Request) -> web.Response:
    return web.Response(text="pong")


async def empty(request: web.Request) -> web.Response:
    return web.Response(status=204)


async def slow(request: web.Request) -> web.Response:
    await asyncio.sleep(1)
    return web.json_response({})


class TestAiohttpTransport(unittest.IsolatedAsyncioTestCase):

    async def asyncSetUp(self):
        app = web.Application()
        app.router.add_post("/oauth/token", token)
        app.router.add_get("/users/{id}", get_user)
        app.router.add_post("/users", create_user)
        app.router.add_get("/search", search)
        app.router.add_post("/forms", submit_form)
        app.router.add_get("/ping", plain_text)
        app.router.add_delete("/users/{id}", empty)
        app.router.add_get("/slow", slow)
        self.server = TestServer(app)
        await self.server.start_server()
        self.base_url = str(self.server.make_url("")).rstrip("/")
        self.transport = AiohttpTransport(timeout=5)

    async def asyncTearDown(self):
        await self.server.close()

    def request(self, method: HTTPMethod, path: str, **kwargs) -> WireRequest:
        kwargs.setdefault("headers", {"accept": "application/json", "content-type": "application/json"})
        kwargs.setdefault("query", {})
        return WireRequest(uri=self.base_url + path, method=method, **kwargs)

    def test_certificate_verification_is_required(self):
        self.assertEqual(self.transport.ssl_context.verify_mode, ssl.CERT_REQUIRED)
        self.assertTrue(self.transport.ssl_context.check_hostname)

    async def test_json_response_is_decoded(self):
        response = await self.transport.send(self.request(HTTPMethod.GET, "/users/7", query={"page": 2, "active": True}))
        self.assertEqual(response.status, 200)
        self.assertEqual(response.body["query"], {"page": "2", "active": "true"})

    async def test_list_query_values_repeat_the_key(self):
        query = {"ids": [1, 2], "filter": {"active": True}, "skip": None}
        response = await self.transport.send(self.request(HTTPMethod.GET, "/search", query=query))
        self.assertEqual(response.body, {"ids": ["1", "2"], "filter": "{\"active\":true}"})

    async def test_json_body_is_sent(self):
        response = await self.transport.send(self.request(HTTPMethod.POST, "/users", json={"name": "Ada"}))
        self.assertEqual(response.status, 201)
        self.assertEqual(response.body, {"created": {"name": "Ada"}, "content_type": "application/json"})

    async def test_form_body_is_sent(self):
        headers = {"accept": "application/json", "content-type": FORM_MIME_TYPE}
        response = await self.transport.send(
            self.request(HTTPMethod.POST, "/forms", headers=headers, form={"a": 1, "b": "x"})
        )
        self.assertEqual(response.body, {"form": {"a": "1", "b": "x"}, "content_type": FORM_MIME_TYPE})

    async def test_text_and_empty_bodies(self):
        text = await self.transport.send(self.request(HTTPMethod.GET, "/ping"))
        self.assertEqual(text.body, "pong")
        no_content = await self.transport.send(self.request(HTTPMethod.DELETE, "/users/1"))
        self.assertEqual(no_content.status, 204)
        self.assertIsNone(no_content.body)

    async def test_connection_error_is_a_transport_failure(self):
        request = WireRequest(uri="http://127.0.0.1:1/users", method=HTTPMethod.GET, headers={}, query={})
        with self.assertRaises(TransportFailed):
            await self.transport.send(request)

    async def test_timeout_is_a_transport_failure(self):
        transport = AiohttpTransport(timeout=0.2)
        with self.assertRaises(TransportFailed) as ctx:
            await transport.send(self.request(HTTPMethod.GET, "/slow"))
        self.assertIn("timed out", ctx.exception.message)

    async def test_client_against_live_server(self):
        config = Configuration(
            base_url=self.base_url,
            user_agent="live-tests/1.0",
            client_id="client-id",
            client_secret="client-secret",
        )
        client = RestClient(config)
        get_user = client.describe({"path": "/users/:id", "method": "GET"})

        result = await get_user.invoke(42, {"expand": "teams"})

        self.assertEqual(result, CallResult(status_code=200, body={
            "id": "42",
            "query": {"expand": "teams", "access_token": "live-token"},
            "user_agent": "live-tests/1.0",
        }))
        self.assertEqual(config.get_refresh_token(), "live-refresh")

    async def test_client_reports_token_rejection(self):
        config = Configuration(base_url=self.base_url, client_id="client-id", client_secret="wrong")
        client = RestClient(config)
        with self.assertRaises(TokenAcquisitionFailed) as ctx:
            await client.ensure_token()
        self.assertEqual(ctx.exception.message, "Error getting the access_token: invalid_client")
        self.assertIsInstance(ctx.exception.cause, HttpStatusFailed)


if __name__ == '__main__':
    unittest.main()
