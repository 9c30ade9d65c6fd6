"""
Unit tests for profile editing over HTTP.

Covers login guards, friendly forwarding, form errors and avatar upload.
"""

from pathlib import Path

from fastapi.testclient import TestClient


def log_in_as(client: TestClient, email: str, password: str = "password"):
    return client.post("/login", data={"email": email, "password": password}, follow_redirects=False)


class TestEditGuards:
    """Edit and update require the matching logged-in user."""

    def test_edit_redirects_anonymous_to_login(self, client: TestClient, activated_account) -> None:
        response = client.get(f"/users/{activated_account.id}/edit", follow_redirects=False)

        assert response.status_code == 303
        assert response.headers["location"] == "/login"
        login_form = client.get("/login").json()
        assert login_form["flash"] == [{"kind": "danger", "message": "Please log in."}]

    def test_update_redirects_anonymous_to_login(
        self, client: TestClient, activated_account, repository
    ) -> None:
        response = client.patch(
            f"/users/{activated_account.id}",
            data={"name": "Hacker", "email": activated_account.email},
            follow_redirects=False,
        )

        assert response.status_code == 303
        assert response.headers["location"] == "/login"
        assert repository.find_by_id(activated_account.id).name == "Michael Example"

    def test_edit_other_user_redirects_home(
        self, client: TestClient, activated_account, other_account
    ) -> None:
        log_in_as(client, other_account.email)

        response = client.get(f"/users/{activated_account.id}/edit", follow_redirects=False)

        assert response.status_code == 303
        assert response.headers["location"] == "/"

    def test_update_other_user_changes_nothing(
        self, client: TestClient, activated_account, other_account, repository
    ) -> None:
        log_in_as(client, other_account.email)

        response = client.patch(
            f"/users/{activated_account.id}",
            data={"name": "Hacker", "email": "hacker@example.com"},
            follow_redirects=False,
        )

        assert response.headers["location"] == "/"
        assert repository.find_by_id(activated_account.id).name == "Michael Example"


class TestEditProfile:
    """Tests for GET /users/{id}/edit and PATCH /users/{id}."""

    def test_edit_form_has_current_values(self, client: TestClient, activated_account) -> None:
        log_in_as(client, activated_account.email)

        body = client.get(f"/users/{activated_account.id}/edit").json()

        assert body["action"] == f"/users/{activated_account.id}"
        assert body["method"] == "patch"
        assert body["values"] == {"name": "Michael Example", "email": "michael@example.com"}

    def test_unsuccessful_edit_shall_fail_with_error_messages(
        self, client: TestClient, activated_account
    ) -> None:
        log_in_as(client, activated_account.email)
        assert client.get(f"/users/{activated_account.id}/edit").status_code == 200

        response = client.patch(
            f"/users/{activated_account.id}",
            data={
                "name": "",
                "email": "foo@invalid",
                "password": "foo",
                "password_confirmation": "bar",
            },
        )

        assert response.status_code == 422
        assert response.json()["detail"] == "The form contains 4 errors."

    def test_successful_edit_with_friendly_forwarding(
        self, client: TestClient, activated_account, repository
    ) -> None:
        client.get(f"/users/{activated_account.id}/edit")
        response = log_in_as(client, activated_account.email)
        assert response.headers["location"] == f"/users/{activated_account.id}/edit"

        response = client.patch(
            f"/users/{activated_account.id}",
            data={"name": "Foo Bar", "email": "foo@bar.com", "password": "", "password_confirmation": ""},
            follow_redirects=False,
        )

        assert response.status_code == 303
        assert response.headers["location"] == f"/users/{activated_account.id}"
        profile = client.get(response.headers["location"]).json()
        assert profile["flash"] == [{"kind": "success", "message": "Profile updated"}]

        stored = repository.find_by_id(activated_account.id)
        assert stored.name == "Foo Bar"
        assert stored.email == "foo@bar.com"
        assert stored.password_digest == activated_account.password_digest

    def test_forwarding_is_used_once(self, client: TestClient, activated_account) -> None:
        client.get(f"/users/{activated_account.id}/edit")
        log_in_as(client, activated_account.email)
        client.delete("/logout")

        response = log_in_as(client, activated_account.email)

        assert response.headers["location"] == f"/users/{activated_account.id}"


class TestAvatarUpload:
    """Avatar upload through PATCH /users/{id}."""

    def test_upload_avatar(self, client: TestClient, activated_account, repository, upload_dir: Path) -> None:
        log_in_as(client, activated_account.email)

        response = client.patch(
            f"/users/{activated_account.id}",
            data={"name": "Michael Example", "email": activated_account.email},
            files={"avatar": ("me.png", b"\x89PNG avatar", "image/png")},
        )

        assert response.status_code == 200
        avatar_url = response.json()["account"]["avatar_url"]
        assert avatar_url.startswith(f"/uploads/avatars/{activated_account.id}/")
        assert repository.find_by_id(activated_account.id).avatar_url == avatar_url
        assert (upload_dir / avatar_url.removeprefix("/uploads/")).read_bytes() == b"\x89PNG avatar"

    def test_rejected_avatar_type(self, client: TestClient, activated_account, repository) -> None:
        log_in_as(client, activated_account.email)

        response = client.patch(
            f"/users/{activated_account.id}",
            data={"name": "Michael Example", "email": activated_account.email},
            files={"avatar": ("notes.txt", b"hello", "text/plain")},
        )

        assert response.status_code == 422
        assert "avatar" in response.json()["errors"]
        assert repository.find_by_id(activated_account.id).avatar_url is None

    def test_rejected_avatar_keeps_profile(self, client: TestClient, activated_account, repository) -> None:
        """A rejected avatar fails the whole edit, profile fields included."""
        log_in_as(client, activated_account.email)

        response = client.patch(
            f"/users/{activated_account.id}",
            data={"name": "Changed Name", "email": "changed@example.com"},
            files={"avatar": ("notes.txt", b"hello", "text/plain")},
        )

        assert response.status_code == 422
        assert list(response.json()["errors"]) == ["avatar"]
        stored = repository.find_by_id(activated_account.id)
        assert stored.name == "Michael Example"
        assert stored.email == "michael@example.com"
        assert stored.avatar_url is None

    def test_avatar_and_profile_errors_in_one_response(
        self, client: TestClient, activated_account, repository
    ) -> None:
        log_in_as(client, activated_account.email)

        response = client.patch(
            f"/users/{activated_account.id}",
            data={"name": "", "email": "changed@example.com"},
            files={"avatar": ("notes.txt", b"hello", "text/plain")},
        )

        assert response.status_code == 422
        assert set(response.json()["errors"]) == {"name", "avatar"}
        assert repository.find_by_id(activated_account.id).email == "michael@example.com"
