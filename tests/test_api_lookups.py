"""Tests for the read-only gateway endpoints.

GET /shutterstock/user/subscriptions
GET /shutterstock/images/{id}
GET /shutterstock/contributor/{id}
"""

import httpx

ADMIN = {"X-Stockroom-User": "admin-token"}
EDITOR = {"X-Stockroom-User": "editor-token"}
PHOTO_EDITOR = {"X-Stockroom-User": "photo-token"}
SUBSCRIBER = {"X-Stockroom-User": "subscriber-token"}


class TestAuthentication:
    """Routes require a known user."""

    def test_missing_user_is_401(self, client, vendor):
        response = client.get("/shutterstock/user/subscriptions")

        assert response.status_code == 401
        assert vendor.requests == []

    def test_unknown_user_is_401(self, client, vendor):
        response = client.get("/shutterstock/images/1", headers={"X-Stockroom-User": "nope"})

        assert response.status_code == 401
        assert vendor.requests == []


class TestLookupPermissions:
    """Read routes grant license-all or license-standard only."""

    def test_subscriber_without_permissions_is_403(self, client, vendor):
        response = client.get("/shutterstock/user/subscriptions", headers=SUBSCRIBER)

        assert response.status_code == 403
        assert vendor.requests == []

    def test_editorial_only_user_is_403(self, client, vendor):
        response = client.get("/shutterstock/contributor/5", headers=PHOTO_EDITOR)

        assert response.status_code == 403
        assert vendor.requests == []

    def test_editorial_query_flag_is_ignored(self, client, vendor):
        response = client.get("/shutterstock/images/5?is_editorial=1", headers=PHOTO_EDITOR)

        assert response.status_code == 403

    def test_standard_user_allowed(self, client, vendor):
        vendor.add_json("GET", "/v2/images/5", {"id": "5"})

        response = client.get("/shutterstock/images/5", headers=EDITOR)

        assert response.status_code == 200


class TestSubscriptions:
    """Test GET /user/subscriptions."""

    def test_returns_filtered_array(self, client, vendor):
        vendor.add_json(
            "GET",
            "/v2/user/subscriptions",
            {
                "data": [
                    {"id": "s1", "license": "standard", "expiration_time": None},
                    {"id": "s2", "license": "other", "expiration_time": None},
                    {"id": "s3", "license": "premier", "expiration_time": "2000-01-01"},
                    {"id": "s4", "license": "media", "expiration_time": "2999-01-01T00:00:00Z"},
                ]
            },
        )

        response = client.get("/shutterstock/user/subscriptions", headers=ADMIN)

        assert response.status_code == 200
        assert [s["id"] for s in response.json()] == ["s1", "s4"]

    def test_vendor_called_with_site_token(self, client, vendor):
        vendor.add_json("GET", "/v2/user/subscriptions", {"data": []})

        client.get("/shutterstock/user/subscriptions", headers=ADMIN)

        request = vendor.find("GET", "/v2/user/subscriptions")[0]
        assert request.headers["Authorization"] == "Bearer vendor-token"
        assert request.headers["x-shutterstock-application"] == "Stockroom/1.2.3"

    def test_vendor_error_passes_through(self, client, vendor):
        vendor.add_json(
            "GET", "/v2/user/subscriptions", {"message": "Invalid token"}, status_code=401
        )

        response = client.get("/shutterstock/user/subscriptions", headers=ADMIN)

        assert response.status_code == 401
        assert response.json() == {"success": False, "data": {"message": "Invalid token"}}

    def test_transport_error_is_502(self, client, vendor):
        vendor.add("GET", "/v2/user/subscriptions", httpx.ConnectTimeout("timed out"))

        response = client.get("/shutterstock/user/subscriptions", headers=ADMIN)

        assert response.status_code == 502
        assert response.json()["success"] is False
        assert response.json()["data"]["code"] == "http_request_failed"
        assert len(vendor.requests) == 1


class TestImageDetails:
    """Test GET /images/{id}."""

    def test_returns_body_verbatim(self, client, vendor):
        body = {"id": "123456", "description": "Mountain lake", "assets": {"huge_jpg": {}}}
        vendor.add_json("GET", "/v2/images/123456", body)

        response = client.get("/shutterstock/images/123456", headers=ADMIN)

        assert response.status_code == 200
        assert response.json() == body
        assert vendor.requests[0].url.params["view"] == "full"

    def test_non_numeric_id_rejected(self, client, vendor):
        response = client.get("/shutterstock/images/abc", headers=ADMIN)

        assert response.status_code == 422
        assert vendor.requests == []

    def test_not_found_passes_status(self, client, vendor):
        vendor.add_json("GET", "/v2/images/9", {"message": "Image not found"}, status_code=404)

        response = client.get("/shutterstock/images/9", headers=ADMIN)

        assert response.status_code == 404
        assert response.json()["data"] == {"message": "Image not found"}


class TestContributorDetails:
    """Test GET /contributor/{id}."""

    def test_returns_body_verbatim(self, client, vendor):
        body = {"data": [{"id": "77", "display_name": "Jane Doe"}]}
        vendor.add_json("GET", "/v2/contributors", body)

        response = client.get("/shutterstock/contributor/77", headers=EDITOR)

        assert response.status_code == 200
        assert response.json() == body
        assert vendor.requests[0].url.params["id"] == "77"


class TestHealth:
    """Test GET /health."""

    def test_health(self, client):
        assert client.get("/health").json() == {"status": "ok"}
