"""
KeepNotes Backend — Notes API Tests
=====================================

What:  End-to-end tests of the /api/notes routes through the ASGI app.
How:   HTTPX AsyncClient + ASGITransport; sessions come from an in-memory
       SQLite database; callers are identified by signed bearer tokens.

What we test:
    ✅ Status codes for every route (201/200/400/401/404/500)
    ✅ Server-assigned owner on create
    ✅ Update allow-list rejected before lookup
    ✅ Ownership isolation across users
    ✅ Delete → trash, second delete → 404
    ✅ Archive toggle round trip
    ✅ Reminder visibility with a real clock
"""

import pytest
from datetime import datetime, timedelta, timezone
from unittest.mock import AsyncMock
from uuid import uuid4

from sqlalchemy.exc import OperationalError

from keepnotes.database import get_db_session


async def create_note(client, headers, **body):
    payload = {"title": "A", "content": "B", **body}
    response = await client.post("/api/notes", json=payload, headers=headers)
    assert response.status_code == 201, response.text
    return response.json()


class TestAuthentication:

    @pytest.mark.asyncio
    async def test_missing_token_is_401(self, test_client):
        response = await test_client.get("/api/notes")

        assert response.status_code == 401
        assert response.json()["error"] == "authentication_error"
        assert response.headers["WWW-Authenticate"] == "Bearer"

    @pytest.mark.asyncio
    async def test_garbage_token_is_401(self, test_client):
        response = await test_client.get(
            "/api/notes", headers={"Authorization": "Bearer not-a-jwt"}
        )

        assert response.status_code == 401


class TestCreate:

    @pytest.mark.asyncio
    async def test_create_returns_201_with_camel_case_note(self, test_client, auth_headers):
        note = await create_note(
            test_client, auth_headers("user-1"), tags=["a", "b"], backgroundColor="yellow"
        )

        assert note["title"] == "A"
        assert note["content"] == "B"
        assert note["tags"] == ["a", "b"]
        assert note["backgroundColor"] == "yellow"
        assert note["isArchived"] is False
        assert note["isDeleted"] is False
        assert note["deletedAt"] is None
        assert note["reminderDate"] is None
        assert "createdAt" in note and "updatedAt" in note

    @pytest.mark.asyncio
    async def test_owner_in_body_is_ignored(self, test_client, auth_headers):
        note = await create_note(
            test_client,
            auth_headers("user-1"),
            owner="intruder",
            user="intruder",
            isDeleted=True,
            isArchived=True,
        )

        assert note["owner"] == "user-1"
        assert note["isDeleted"] is False
        assert note["isArchived"] is False

    @pytest.mark.asyncio
    async def test_missing_content_is_400(self, test_client, auth_headers):
        response = await test_client.post(
            "/api/notes", json={"title": "only a title"}, headers=auth_headers()
        )

        assert response.status_code == 400
        assert response.json()["error"] == "validation_error"

    @pytest.mark.asyncio
    async def test_empty_title_is_400(self, test_client, auth_headers):
        response = await test_client.post(
            "/api/notes", json={"title": "", "content": "x"}, headers=auth_headers()
        )

        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_whitespace_title_is_400(self, test_client, auth_headers):
        response = await test_client.post(
            "/api/notes", json={"title": "   ", "content": "x"}, headers=auth_headers()
        )

        body = response.json()
        assert response.status_code == 400
        assert body["error"] == "validation_error"
        assert body["details"] == {"field": "title"}


class TestListings:

    @pytest.mark.asyncio
    async def test_active_listing_sets_total_count(self, test_client, auth_headers):
        headers = auth_headers("user-1")
        await create_note(test_client, headers)
        await create_note(test_client, headers)

        response = await test_client.get("/api/notes", headers=headers)

        assert response.status_code == 200
        assert len(response.json()) == 2
        assert response.headers["X-Total-Count"] == "2"

    @pytest.mark.asyncio
    async def test_future_reminder_is_active_not_due(self, test_client, auth_headers):
        headers = auth_headers("user-1")
        in_an_hour = (datetime.now(timezone.utc) + timedelta(hours=1)).isoformat()
        note = await create_note(test_client, headers, reminderDate=in_an_hour)

        active = (await test_client.get("/api/notes", headers=headers)).json()
        reminders = (await test_client.get("/api/notes/reminders", headers=headers)).json()

        assert note["id"] in [n["id"] for n in active]
        assert note["id"] not in [n["id"] for n in reminders]

    @pytest.mark.asyncio
    async def test_past_reminder_is_due_not_active(self, test_client, auth_headers):
        headers = auth_headers("user-1")
        an_hour_ago = (datetime.now(timezone.utc) - timedelta(hours=1)).isoformat()
        note = await create_note(test_client, headers, reminderDate=an_hour_ago)

        active = (await test_client.get("/api/notes", headers=headers)).json()
        reminders = (await test_client.get("/api/notes/reminders", headers=headers)).json()

        assert note["id"] not in [n["id"] for n in active]
        assert note["id"] in [n["id"] for n in reminders]

    @pytest.mark.asyncio
    async def test_null_reminder_is_active_only(self, test_client, auth_headers):
        headers = auth_headers("user-1")
        note = await create_note(test_client, headers, reminderDate=None)

        active = (await test_client.get("/api/notes", headers=headers)).json()
        reminders = (await test_client.get("/api/notes/reminders", headers=headers)).json()

        assert [n["id"] for n in active] == [note["id"]]
        assert reminders == []

    @pytest.mark.asyncio
    async def test_store_failure_is_500_with_generic_message(self, test_client, auth_headers, mock_db_session):
        from keepnotes.main import app

        mock_db_session.execute = AsyncMock(
            side_effect=OperationalError("SELECT", {}, Exception("connection reset"))
        )
        app.dependency_overrides[get_db_session] = lambda: mock_db_session

        response = await test_client.get("/api/notes/archived", headers=auth_headers())

        assert response.status_code == 500
        body = response.json()
        assert body["error"] == "server_error"
        assert "connection reset" not in body["message"]


class TestSingleNote:

    @pytest.mark.asyncio
    async def test_other_user_gets_404(self, test_client, auth_headers):
        note = await create_note(test_client, auth_headers("user-1"))

        response = await test_client.get(f"/api/notes/{note['id']}", headers=auth_headers("user-2"))

        assert response.status_code == 404
        assert response.json()["error"] == "not_found"

    @pytest.mark.asyncio
    async def test_owner_can_fetch(self, test_client, auth_headers):
        note = await create_note(test_client, auth_headers("user-1"))

        response = await test_client.get(f"/api/notes/{note['id']}", headers=auth_headers("user-1"))

        assert response.status_code == 200
        assert response.json()["id"] == note["id"]

    @pytest.mark.asyncio
    async def test_patch_updates_allowed_fields(self, test_client, auth_headers):
        headers = auth_headers("user-1")
        note = await create_note(test_client, headers)

        response = await test_client.patch(
            f"/api/notes/{note['id']}",
            json={"title": "Renamed", "backgroundColor": "blue", "tags": ["t"]},
            headers=headers,
        )

        assert response.status_code == 200
        body = response.json()
        assert body["title"] == "Renamed"
        assert body["backgroundColor"] == "blue"
        assert body["tags"] == ["t"]
        assert body["content"] == "B"

    @pytest.mark.asyncio
    async def test_patch_disallowed_field_is_400_even_for_missing_note(self, test_client, auth_headers):
        response = await test_client.patch(
            f"/api/notes/{uuid4()}",
            json={"owner": "someone-else"},
            headers=auth_headers("user-1"),
        )

        assert response.status_code == 400
        assert response.json()["message"] == "Invalid updates"

    @pytest.mark.asyncio
    async def test_patch_disallowed_field_applies_nothing(self, test_client, auth_headers):
        headers = auth_headers("user-1")
        note = await create_note(test_client, headers)

        response = await test_client.patch(
            f"/api/notes/{note['id']}",
            json={"title": "Changed", "isArchived": True},
            headers=headers,
        )
        fetched = (await test_client.get(f"/api/notes/{note['id']}", headers=headers)).json()

        assert response.status_code == 400
        assert fetched["title"] == "A"
        assert fetched["isArchived"] is False

    @pytest.mark.asyncio
    async def test_patch_null_title_is_400(self, test_client, auth_headers):
        headers = auth_headers("user-1")
        note = await create_note(test_client, headers)

        response = await test_client.patch(
            f"/api/notes/{note['id']}", json={"title": None}, headers=headers
        )

        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_patch_other_users_note_is_404(self, test_client, auth_headers):
        note = await create_note(test_client, auth_headers("user-1"))

        response = await test_client.patch(
            f"/api/notes/{note['id']}", json={"title": "mine now"}, headers=auth_headers("user-2")
        )

        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_delete_moves_note_to_trash(self, test_client, auth_headers):
        headers = auth_headers("user-1")
        note = await create_note(test_client, headers)

        response = await test_client.delete(f"/api/notes/{note['id']}", headers=headers)
        trash = (await test_client.get("/api/notes/trash", headers=headers)).json()
        active = (await test_client.get("/api/notes", headers=headers)).json()

        assert response.status_code == 200
        assert response.json() == {"message": "Note deleted successfully"}
        assert [n["id"] for n in trash] == [note["id"]]
        assert trash[0]["isDeleted"] is True
        assert trash[0]["deletedAt"] is not None
        assert active == []

    @pytest.mark.asyncio
    async def test_second_delete_is_404(self, test_client, auth_headers):
        headers = auth_headers("user-1")
        note = await create_note(test_client, headers)

        await test_client.delete(f"/api/notes/{note['id']}", headers=headers)
        response = await test_client.delete(f"/api/notes/{note['id']}", headers=headers)

        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_archive_toggle_round_trip(self, test_client, auth_headers):
        headers = auth_headers("user-1")
        note = await create_note(test_client, headers)

        first = await test_client.patch(f"/api/notes/{note['id']}/archive", headers=headers)
        archived = (await test_client.get("/api/notes/archived", headers=headers)).json()
        second = await test_client.patch(f"/api/notes/{note['id']}/archive", headers=headers)

        assert first.status_code == 200
        assert first.json()["isArchived"] is True
        assert [n["id"] for n in archived] == [note["id"]]
        assert second.json()["isArchived"] is False

    @pytest.mark.asyncio
    async def test_archive_missing_note_is_404(self, test_client, auth_headers):
        response = await test_client.patch(f"/api/notes/{uuid4()}/archive", headers=auth_headers())

        assert response.status_code == 404

    @pytest.mark.asyncio
    @pytest.mark.parametrize("method,path,body", [
        ("GET", "/api/notes/not-a-uuid", None),
        ("DELETE", "/api/notes/abc", None),
        ("PATCH", "/api/notes/abc/archive", None),
        ("PATCH", "/api/notes/abc", {"title": "x"}),
    ])
    async def test_malformed_id_is_404(self, test_client, auth_headers, method, path, body):
        response = await test_client.request(method, path, json=body, headers=auth_headers())

        assert response.status_code == 404
        assert response.json()["error"] == "not_found"

    @pytest.mark.asyncio
    async def test_patch_blank_content_is_400(self, test_client, auth_headers):
        headers = auth_headers("user-1")
        note = await create_note(test_client, headers)

        response = await test_client.patch(
            f"/api/notes/{note['id']}", json={"content": "   "}, headers=headers
        )

        assert response.status_code == 400
        assert response.json()["details"] == {"field": "content"}


class TestHealth:

    @pytest.mark.asyncio
    async def test_health_needs_no_token(self, test_client):
        response = await test_client.get("/health")

        assert response.status_code == 200
        assert response.json()["database"] == "connected"
        assert "X-Request-ID" in response.headers
