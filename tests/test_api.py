import asyncio
import time

import httpx
from fastapi.testclient import TestClient

from main import app
from tinyurl_app.dependencies import SESSION_COOKIE_NAME, get_identity_store
from tinyurl_app.services.identity_service import IdentityStore

SLOW_HASH_SECONDS = 0.5


class SlowIdentityStore(IdentityStore):
    """Stands in for production bcrypt cost: every check blocks its thread"""

    def authenticate(self, email, password):
        time.sleep(SLOW_HASH_SECONDS)
        return super().authenticate(email, password)


async def health_latency_during_logins(login_count: int):
    """Seconds from firing login_count logins until a GET /health completes"""
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://testserver") as http:
        started = time.perf_counter()
        logins = [
            asyncio.create_task(http.post(
                "/api/v1/auth/login",
                json={"email": "alice@example.com", "password": "pw1"}
            ))
            for _ in range(login_count)
        ]
        await asyncio.sleep(0.05)

        health = await http.get("/health")
        latency = time.perf_counter() - started

        responses = await asyncio.gather(*logins)
    return latency, health.status_code, [r.status_code for r in responses]


def register(client: TestClient, email="alice@example.com", password="pw1"):
    return client.post("/api/v1/auth/register", json={"email": email, "password": password})


def create_url(client: TestClient, long_url="https://www.github.com/"):
    return client.post("/api/v1/urls/", json={"long_url": long_url})


class TestService:

    def test_root(self, client: TestClient):
        response = client.get("/")
        assert response.status_code == 200
        assert "version" in response.json()

    def test_health(self, client: TestClient):
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json()["status"] == "healthy"


class TestAuthAPI:
    """Registration, login, logout"""

    def test_register_logs_in(self, client: TestClient):
        response = register(client)
        assert response.status_code == 201

        data = response.json()
        assert data["email"] == "alice@example.com"
        assert "credential_hash" not in data
        assert SESSION_COOKIE_NAME in response.cookies

        me = client.get("/api/v1/auth/me")
        assert me.status_code == 200
        assert me.json()["id"] == data["id"]

    def test_register_missing_fields(self, client: TestClient):
        response = client.post("/api/v1/auth/register", json={"email": "alice@example.com"})
        assert response.status_code == 400

    def test_register_duplicate_email(self, client: TestClient):
        register(client)
        response = register(client, password="other")

        assert response.status_code == 400
        assert response.json()["detail"] == "That email has already been registered"

    def test_login(self, client: TestClient, make_client):
        account_id = register(client).json()["id"]

        other = make_client()
        response = other.post(
            "/api/v1/auth/login",
            json={"email": "alice@example.com", "password": "pw1"}
        )
        assert response.status_code == 200
        assert response.json()["id"] == account_id
        assert other.get("/api/v1/auth/me").json()["id"] == account_id

    def test_login_failures_are_indistinguishable(self, client: TestClient, make_client):
        register(client)
        other = make_client()

        wrong_password = other.post(
            "/api/v1/auth/login",
            json={"email": "alice@example.com", "password": "nope"}
        )
        unknown_email = other.post(
            "/api/v1/auth/login",
            json={"email": "bob@example.com", "password": "pw1"}
        )

        assert wrong_password.status_code == unknown_email.status_code == 401
        assert wrong_password.json() == unknown_email.json()

    def test_me_anonymous(self, client: TestClient):
        assert client.get("/api/v1/auth/me").status_code == 401

    def test_logout_revokes_token(self, client: TestClient):
        register(client)
        token = client.cookies.get(SESSION_COOKIE_NAME)

        response = client.post("/api/v1/auth/logout")
        assert response.status_code == 204
        assert client.get("/api/v1/auth/me").status_code == 401

        # Replaying the old cookie does not bring the session back
        client.cookies.set(SESSION_COOKIE_NAME, token)
        assert client.get("/api/v1/auth/me").status_code == 401

    def test_logout_clears_cookie_with_same_attributes(self, client: TestClient):
        register(client)

        response = client.post("/api/v1/auth/logout")

        cleared = response.headers["set-cookie"]
        assert cleared.startswith(f"{SESSION_COOKIE_NAME}=")
        assert "httponly" in cleared.lower()
        assert "samesite=lax" in cleared.lower()

    def test_slow_logins_do_not_block_other_requests(self, client: TestClient):
        """Password checks run off the event loop, so /health answers at once"""
        store = SlowIdentityStore(bcrypt_rounds=4)
        store.register("alice@example.com", "pw1")
        app.dependency_overrides[get_identity_store] = lambda: store
        try:
            latency, health_status, login_statuses = asyncio.run(health_latency_during_logins(3))
        finally:
            app.dependency_overrides.pop(get_identity_store, None)

        assert health_status == 200
        assert login_statuses == [200, 200, 200]
        assert latency < SLOW_HASH_SECONDS / 2

    def test_logout_anonymous(self, client: TestClient):
        assert client.post("/api/v1/auth/logout").status_code == 204

    def test_forged_cookie_is_anonymous(self, client: TestClient):
        client.cookies.set(SESSION_COOKIE_NAME, "forged.token.value")
        assert client.get("/api/v1/auth/me").status_code == 401


class TestURLsAPI:
    """Owner-scoped management of short URLs"""

    def test_create_short_url(self, client: TestClient):
        account_id = register(client).json()["id"]

        response = create_url(client)
        assert response.status_code == 201

        data = response.json()
        assert len(data["code"]) == 6
        assert data["long_url"] == "https://www.github.com/"
        assert data["owner_id"] == account_id
        assert data["short_url"].endswith(f"/u/{data['code']}")

    def test_create_requires_login(self, client: TestClient):
        assert create_url(client).status_code == 401

    def test_create_empty_url(self, client: TestClient):
        register(client)
        assert create_url(client, long_url="").status_code == 400

    def test_get_url_info(self, client: TestClient):
        register(client)
        code = create_url(client).json()["code"]

        response = client.get(f"/api/v1/urls/{code}")
        assert response.status_code == 200
        assert response.json()["code"] == code

    def test_status_ladder(self, client: TestClient, make_client):
        register(client)
        code = create_url(client).json()["code"]

        anonymous = make_client()
        bob = make_client()
        register(bob, email="bob@example.com")

        assert anonymous.get("/api/v1/urls/nope00").status_code == 404
        assert anonymous.get(f"/api/v1/urls/{code}").status_code == 401
        assert bob.get(f"/api/v1/urls/{code}").status_code == 403
        assert bob.put(f"/api/v1/urls/{code}", json={"long_url": "http://evil"}).status_code == 403
        assert bob.delete(f"/api/v1/urls/{code}").status_code == 403
        assert anonymous.delete(f"/api/v1/urls/{code}").status_code == 401

        # Nothing changed for the owner
        assert client.get(f"/api/v1/urls/{code}").json()["long_url"] == "https://www.github.com/"

    def test_update_url(self, client: TestClient):
        register(client)
        code = create_url(client, "http://x").json()["code"]

        response = client.put(f"/api/v1/urls/{code}", json={"long_url": "http://y"})
        assert response.status_code == 200
        assert response.json()["long_url"] == "http://y"

        redirect = client.get(f"/u/{code}", follow_redirects=False)
        assert redirect.headers["location"] == "http://y"

    def test_list_my_urls(self, client: TestClient, make_client):
        register(client)
        mine = {create_url(client, f"http://a/{i}").json()["code"] for i in range(3)}

        bob = make_client()
        register(bob, email="bob@example.com")
        create_url(bob, "http://b")

        response = client.get("/api/v1/urls/")
        assert response.status_code == 200
        assert {item["code"] for item in response.json()} == mine

    def test_list_requires_login(self, client: TestClient):
        assert client.get("/api/v1/urls/").status_code == 401

    def test_delete_url(self, client: TestClient):
        register(client)
        code = create_url(client).json()["code"]

        response = client.delete(f"/api/v1/urls/{code}")
        assert response.status_code == 204

        assert client.get(f"/u/{code}", follow_redirects=False).status_code == 404
        assert client.get("/api/v1/urls/").json() == []


class TestRedirectAPI:
    """Public redirect path"""

    def test_redirect_is_public(self, client: TestClient, make_client):
        register(client)
        code = create_url(client).json()["code"]

        anonymous = make_client()
        response = anonymous.get(f"/u/{code}", follow_redirects=False)
        assert response.status_code == 302
        assert response.headers["location"] == "https://www.github.com/"

    def test_redirect_nonexistent_url(self, client: TestClient):
        response = client.get("/u/nonexistent", follow_redirects=False)
        assert response.status_code == 404
