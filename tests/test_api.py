"""
HTTP tests for the FastAPI application.
"""

import pytest

from tests.conftest import TEST_PASSWORD, register_and_login

CHROME = "Mozilla/5.0 (Windows NT 10.0) AppleWebKit/537.36 Chrome/120.0 Safari/537.36"
FIREFOX = "Mozilla/5.0 (X11; Linux x86_64; rv:121.0) Gecko/20100101 Firefox/121.0"


async def create_link(client, **body):
    body.setdefault("url", "https://example.com/page")
    response = await client.post("/api/links", json=body)
    assert response.status_code == 201, response.text
    return response.json()


class TestHealth:
    @pytest.mark.asyncio
    async def test_root_and_health(self, client):
        assert (await client.get("/")).status_code == 200
        response = await client.get("/health")
        assert response.json() == {"status": "healthy"}
        assert "X-Process-Time" in response.headers


class TestAccounts:
    @pytest.mark.asyncio
    async def test_register_login_me_logout(self, client):
        await register_and_login(client, "Alice@Example.com")

        me = await client.get("/api/auth/me")
        assert me.status_code == 200
        assert me.json()["email"] == "alice@example.com"

        assert (await client.post("/api/auth/logout")).status_code == 204
        client.cookies.clear()
        assert (await client.get("/api/auth/me")).status_code == 401

    @pytest.mark.asyncio
    async def test_duplicate_registration(self, client):
        body = {"email": "bob@example.com", "password": TEST_PASSWORD}
        assert (await client.post("/api/auth/register", json=body)).status_code == 201
        assert (await client.post("/api/auth/register", json=body)).status_code == 409

    @pytest.mark.asyncio
    async def test_malformed_email(self, client):
        body = {"email": "not-an-email", "password": TEST_PASSWORD}
        assert (await client.post("/api/auth/register", json=body)).status_code == 400

    @pytest.mark.asyncio
    async def test_wrong_password(self, client):
        await client.post("/api/auth/register", json={"email": "eve@example.com", "password": TEST_PASSWORD})
        response = await client.post(
            "/api/auth/login", json={"email": "eve@example.com", "password": "wrong password"}
        )
        assert response.status_code == 401

    @pytest.mark.asyncio
    async def test_link_routes_require_login(self, client):
        assert (await client.get("/api/links")).status_code == 401
        assert (await client.post("/api/links", json={"url": "https://example.com"})).status_code == 401
        assert (await client.get("/api/dashboard")).status_code == 401


class TestLinks:
    @pytest.mark.asyncio
    async def test_create_link(self, auth_client):
        data = await create_link(auth_client, title="Example")

        assert len(data["code"]) == 6
        assert data["destination_url"] == "https://example.com/page"
        assert data["short_url"].endswith(f"/{data['code']}")
        assert data["title"] == "Example"

    @pytest.mark.asyncio
    async def test_invalid_url(self, auth_client):
        response = await auth_client.post("/api/links", json={"url": "javascript:alert(1)"})
        assert response.status_code == 400
        assert response.json()["detail"]["error"] == "invalid_url"

    @pytest.mark.asyncio
    async def test_custom_code_taken(self, auth_client):
        await create_link(auth_client, custom_code="launch")
        response = await auth_client.post(
            "/api/links", json={"url": "https://example.com/other", "custom_code": "launch"}
        )
        assert response.status_code == 409
        assert response.json()["detail"]["error"] == "code_taken"

    @pytest.mark.asyncio
    async def test_invalid_custom_code(self, auth_client):
        response = await auth_client.post(
            "/api/links", json={"url": "https://example.com", "custom_code": "a b"}
        )
        assert response.status_code == 400
        assert response.json()["detail"]["error"] == "invalid_code"

    @pytest.mark.asyncio
    async def test_list_get_update_delete(self, auth_client):
        first = await create_link(auth_client, url="https://example.com/1")
        second = await create_link(auth_client, url="https://example.com/2", title="Second")

        listed = (await auth_client.get("/api/links")).json()
        assert [link["id"] for link in listed] == [second["id"], first["id"]]

        fetched = await auth_client.get(f"/api/links/{first['id']}")
        assert fetched.json()["destination_url"] == "https://example.com/1"

        updated = await auth_client.patch(f"/api/links/{second['id']}", json={"title": "Renamed"})
        assert updated.status_code == 200
        assert updated.json()["title"] == "Renamed"

        assert (await auth_client.delete(f"/api/links/{first['id']}")).status_code == 204
        assert (await auth_client.get(f"/api/links/{first['id']}")).status_code == 404
        assert (await auth_client.delete(f"/api/links/{first['id']}")).status_code == 404

    @pytest.mark.asyncio
    async def test_links_of_other_users_are_invisible(self, auth_client):
        link = await create_link(auth_client)

        auth_client.cookies.clear()
        await register_and_login(auth_client, "mallory@example.com")

        assert (await auth_client.get(f"/api/links/{link['id']}")).status_code == 404
        patched = await auth_client.patch(f"/api/links/{link['id']}", json={"title": "pwned"})
        assert patched.status_code == 404
        assert (await auth_client.delete(f"/api/links/{link['id']}")).status_code == 404
        assert (await auth_client.get(f"/api/links/{link['id']}/analytics")).status_code == 404
        assert (await auth_client.get("/api/links")).json() == []


class TestRedirect:
    @pytest.mark.asyncio
    async def test_redirect_records_visit(self, auth_client):
        link = await create_link(auth_client)

        for agent in (CHROME, FIREFOX, CHROME):
            response = await auth_client.get(
                f"/{link['code']}",
                headers={"User-Agent": agent, "Referer": "https://news.example.org/"},
            )
            assert response.status_code == 302
            assert response.headers["location"] == "https://example.com/page"

        analytics = (await auth_client.get(f"/api/links/{link['id']}/analytics")).json()
        assert analytics["total_visits"] == 3
        assert analytics["browsers"] == [
            {"browser": "Chrome", "count": 2},
            {"browser": "Firefox", "count": 1},
        ]
        assert analytics["referrers"] == [{"referrer": "https://news.example.org/", "count": 3}]
        assert len(analytics["visits_over_time"]) == 1

    @pytest.mark.asyncio
    async def test_unknown_code_redirects_home(self, client):
        response = await client.get("/doesnotexist")
        assert response.status_code == 302
        assert response.headers["location"] == "/"

    @pytest.mark.asyncio
    async def test_country_header_is_recorded(self, auth_client):
        link = await create_link(auth_client)
        await auth_client.get(f"/{link['code']}", headers={"CF-IPCountry": "NL"})

        analytics = (await auth_client.get(f"/api/links/{link['id']}/analytics")).json()
        assert analytics["countries"] == [{"country": "NL", "count": 1}]

    @pytest.mark.asyncio
    async def test_deleted_link_redirects_home(self, auth_client):
        link = await create_link(auth_client)
        await auth_client.delete(f"/api/links/{link['id']}")

        response = await auth_client.get(f"/{link['code']}")
        assert response.headers["location"] == "/"


class TestAnalyticsEndpoints:
    @pytest.mark.asyncio
    async def test_empty_link_analytics(self, auth_client):
        link = await create_link(auth_client)
        analytics = (await auth_client.get(f"/api/links/{link['id']}/analytics")).json()

        assert analytics == {
            "total_visits": 0,
            "unique_visitors": 0,
            "browsers": [],
            "os": [],
            "devices": [],
            "countries": [],
            "referrers": [],
            "visits_over_time": [],
        }

    @pytest.mark.asyncio
    async def test_days_parameter_is_bounded(self, auth_client):
        link = await create_link(auth_client)
        response = await auth_client.get(f"/api/links/{link['id']}/analytics?days=0")
        assert response.status_code == 422

    @pytest.mark.asyncio
    async def test_dashboard(self, auth_client):
        first = await create_link(auth_client, url="https://example.com/1")
        await create_link(auth_client, url="https://example.com/2")
        await auth_client.get(f"/{first['code']}", headers={"User-Agent": CHROME})

        dashboard = (await auth_client.get("/api/dashboard")).json()

        assert dashboard["total_links"] == 2
        assert dashboard["total_visits"] == 1
        assert dashboard["visits_per_link"] == 0.5
        assert len(dashboard["recent_links"]) == 2
        assert dashboard["analytics"]["browsers"] == [{"browser": "Chrome", "count": 1}]
