"""
HTTP tests for the user routes.
"""


# =============================================================================
# Own profile
# =============================================================================


class TestProfile:
    def test_get_profile(self, client, headers_for):
        response = client.get("/api/user/profile", headers=headers_for("alice"))

        assert response.status_code == 200
        body = response.json()
        assert body["uid"] == "alice"
        assert body["email"] == "alice@example.com"
        assert body["roles"] == []

    def test_requires_auth(self, client):
        assert client.get("/api/user/profile").status_code == 401

    def test_update_profile(self, client, headers_for):
        response = client.put(
            "/api/user/profile",
            json={"displayName": "Alice B", "school": "Lincoln High"},
            headers=headers_for("alice"),
        )

        assert response.status_code == 200
        assert response.json() == {"success": True, "message": "Profile updated successfully"}

        profile = client.get("/api/user/profile", headers=headers_for("alice")).json()
        assert profile["school"] == "Lincoln High"
        assert profile["displayName"] == "Alice B"

    def test_protected_fields_are_ignored(self, client, headers_for):
        client.put(
            "/api/user/profile",
            json={"uid": "root", "email": "x@example.com", "roles": ["admin"], "grade": 11},
            headers=headers_for("alice"),
        )

        profile = client.get("/api/user/profile", headers=headers_for("alice")).json()
        assert profile["uid"] == "alice"
        assert profile["email"] == "alice@example.com"
        assert profile["roles"] == []
        assert profile["grade"] == 11

        # Still not an admin
        assert client.get("/api/user/all", headers=headers_for("alice")).status_code == 403


# =============================================================================
# Admin
# =============================================================================


class TestAdminAccess:
    def test_non_admin_is_403(self, client, headers_for):
        for path in ("/api/user/all", "/api/user/bob"):
            response = client.get(path, headers=headers_for("alice"))

            assert response.status_code == 403
            assert response.json() == {"error": "Forbidden - Insufficient permissions"}

    def test_non_admin_cannot_change_roles(self, client, headers_for):
        response = client.post(
            "/api/user/alice/roles",
            json={"roles": ["admin"], "action": "add"},
            headers=headers_for("alice"),
        )

        assert response.status_code == 403

    def test_anonymous_is_401(self, client):
        assert client.get("/api/user/all").status_code == 401

    def test_list_users(self, client, headers_for):
        response = client.get("/api/user/all", headers=headers_for("root"))

        assert response.status_code == 200
        uids = {user["uid"] for user in response.json()}
        assert uids == {"alice", "bob", "root"}

    def test_get_user(self, client, headers_for):
        client.put(
            "/api/user/profile",
            json={"displayName": "Bobby", "school": "Lincoln High"},
            headers=headers_for("bob"),
        )

        response = client.get("/api/user/bob", headers=headers_for("root"))

        assert response.status_code == 200
        body = response.json()
        assert body["displayName"] == "Bobby"
        assert body["school"] == "Lincoln High"
        assert body["disabled"] is False

    def test_get_unknown_user_is_404(self, client, headers_for):
        response = client.get("/api/user/ghost", headers=headers_for("root"))

        assert response.status_code == 404


class TestRoleUpdates:
    def test_add_then_remove(self, client, headers_for):
        root = headers_for("root")

        added = client.post(
            "/api/user/bob/roles", json={"roles": ["premium"], "action": "add"}, headers=root
        )
        assert added.status_code == 200
        assert added.json() == {
            "success": True,
            "message": "Roles added successfully",
            "roles": ["premium"],
        }

        # Claims are copied into tokens when issued
        vocabulary = client.get("/api/questions/vocabulary", headers=headers_for("bob"))
        assert vocabulary.json()["roles"] == ["premium"]

        removed = client.post(
            "/api/user/bob/roles", json={"roles": ["premium"], "action": "remove"}, headers=root
        )
        assert removed.json()["message"] == "Roles removed successfully"
        assert removed.json()["roles"] == []

    def test_promoted_user_gets_admin_access(self, client, headers_for):
        old_headers = headers_for("bob")
        client.post(
            "/api/user/bob/roles",
            json={"roles": ["admin"], "action": "add"},
            headers=headers_for("root"),
        )

        assert client.get("/api/user/all", headers=old_headers).status_code == 403
        assert client.get("/api/user/all", headers=headers_for("bob")).status_code == 200

    def test_missing_action(self, client, headers_for):
        response = client.post(
            "/api/user/bob/roles", json={"roles": ["premium"]}, headers=headers_for("root")
        )

        assert response.status_code == 400
        assert response.json()["error"] == (
            "Invalid request. Provide roles array and action (add/remove)"
        )

    def test_bad_action(self, client, headers_for):
        response = client.post(
            "/api/user/bob/roles",
            json={"roles": ["premium"], "action": "toggle"},
            headers=headers_for("root"),
        )

        assert response.status_code == 400
        assert response.json()["error"] == 'Invalid action. Use "add" or "remove"'

    def test_roles_must_be_a_list(self, client, headers_for):
        response = client.post(
            "/api/user/bob/roles",
            json={"roles": "premium", "action": "add"},
            headers=headers_for("root"),
        )

        assert response.status_code == 400

    def test_unknown_role(self, client, headers_for):
        response = client.post(
            "/api/user/bob/roles",
            json={"roles": ["wizard"], "action": "add"},
            headers=headers_for("root"),
        )

        assert response.status_code == 400
        assert response.json()["fields"] == ["roles"]

    def test_unknown_user(self, client, headers_for):
        response = client.post(
            "/api/user/ghost/roles",
            json={"roles": ["premium"], "action": "add"},
            headers=headers_for("root"),
        )

        assert response.status_code == 404


class TestStatusUpdates:
    def test_disable_then_enable(self, client, headers_for):
        bob = headers_for("bob")

        response = client.put(
            "/api/user/bob/status", json={"disabled": True}, headers=headers_for("root")
        )
        assert response.status_code == 200
        assert response.json() == {"success": True, "message": "User disabled successfully"}
        assert client.get("/api/user/profile", headers=bob).status_code == 401

        response = client.put(
            "/api/user/bob/status", json={"disabled": False}, headers=headers_for("root")
        )
        assert response.json()["message"] == "User enabled successfully"
        assert client.get("/api/user/profile", headers=bob).status_code == 200

    def test_missing_flag(self, client, headers_for):
        response = client.put("/api/user/bob/status", json={}, headers=headers_for("root"))

        assert response.status_code == 400
        assert response.json()["error"] == "Invalid request. Provide disabled status (boolean)"

    def test_non_boolean_flag(self, client, headers_for):
        response = client.put(
            "/api/user/bob/status", json={"disabled": "yes"}, headers=headers_for("root")
        )

        assert response.status_code == 400
