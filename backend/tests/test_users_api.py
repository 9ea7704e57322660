"""
TechNotes Backend - /users Endpoint Tests
===========================================

What:  End-to-end tests of the users API through the ASGI app.
How:   HTTPX AsyncClient + in-memory SQLite (see conftest.py). Row counts and
       stored hashes are checked directly through db_session_factory.
"""

import uuid

import pytest
from sqlalchemy import func, select

from technotes.models.user import User
from technotes.services.password_service import PasswordService


async def count_users(db_session_factory, username=None) -> int:
    async with db_session_factory() as session:
        query = select(func.count(User.id))
        if username is not None:
            query = query.where(User.username == username)
        return (await session.execute(query)).scalar()


class TestCreateUser:

    @pytest.mark.asyncio
    async def test_create_user(self, test_client, db_session_factory):
        response = await test_client.post(
            "/users",
            json={"username": "alice", "password": "s3cret-pass", "roles": ["Employee"]},
        )

        assert response.status_code == 201
        assert response.json() == {"message": "New user alice created"}

        async with db_session_factory() as session:
            user = (await session.execute(select(User))).scalar_one()
        assert user.username == "alice"
        assert user.active is True
        assert user.password != "s3cret-pass"
        assert PasswordService(rounds=4).verify_sync("s3cret-pass", user.password)

    @pytest.mark.asyncio
    async def test_duplicate_username_conflicts(self, test_client, db_session_factory, create_user):
        await create_user("alice")

        response = await test_client.post(
            "/users",
            json={"username": "alice", "password": "other", "roles": ["Manager"]},
        )

        assert response.status_code == 409
        assert response.json()["error"] == "conflict"
        assert await count_users(db_session_factory, "alice") == 1

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "body",
        [
            {"password": "pw", "roles": ["Employee"]},
            {"username": "alice", "roles": ["Employee"]},
            {"username": "alice", "password": "pw", "roles": []},
            {"username": "alice", "password": "pw"},
            {"username": "", "password": "pw", "roles": ["Employee"]},
        ],
    )
    async def test_missing_fields_rejected(self, test_client, db_session_factory, body):
        response = await test_client.post("/users", json=body)

        assert response.status_code == 400
        assert response.json()["error"] == "validation_error"
        assert await count_users(db_session_factory) == 0

    @pytest.mark.asyncio
    async def test_wrong_types_rejected_as_bad_request(self, test_client, db_session_factory):
        response = await test_client.post(
            "/users",
            json={"username": "alice", "password": "pw", "roles": "Employee"},
        )

        assert response.status_code == 400
        assert await count_users(db_session_factory) == 0


class TestListUsers:

    @pytest.mark.asyncio
    async def test_list_never_includes_password(self, test_client, create_user):
        await create_user("alice")
        await create_user("bob", roles=["Employee", "Admin"])

        response = await test_client.get("/users")

        assert response.status_code == 200
        users = response.json()
        assert [u["username"] for u in users] == ["alice", "bob"]
        for user in users:
            assert "password" not in user
            assert set(user) == {"id", "username", "roles", "active"}

    @pytest.mark.asyncio
    async def test_list_sets_total_count_header(self, test_client, create_user):
        await create_user("alice")
        await create_user("bob")

        response = await test_client.get("/users")

        assert response.headers["X-Total-Count"] == "2"

    @pytest.mark.asyncio
    async def test_list_empty(self, test_client):
        response = await test_client.get("/users")

        assert response.status_code == 200
        assert response.json() == []
        assert response.headers["X-Total-Count"] == "0"


class TestUpdateUser:

    @pytest.mark.asyncio
    async def test_update_with_unchanged_username(self, test_client, create_user):
        alice = await create_user("alice")

        response = await test_client.patch(
            "/users",
            json={"id": alice["id"], "username": "alice", "roles": ["Manager"], "active": False},
        )

        assert response.status_code == 200
        assert response.json() == {"message": "alice updated"}

        users = (await test_client.get("/users")).json()
        assert users[0]["roles"] == ["Manager"]
        assert users[0]["active"] is False

    @pytest.mark.asyncio
    async def test_update_to_taken_username(self, test_client, create_user):
        alice = await create_user("alice")
        await create_user("bob")

        response = await test_client.patch(
            "/users",
            json={"id": alice["id"], "username": "bob", "roles": ["Employee"], "active": True},
        )

        assert response.status_code == 409

    @pytest.mark.asyncio
    async def test_update_changes_password(self, test_client, db_session_factory, create_user):
        alice = await create_user("alice", password="old-pass")

        response = await test_client.patch(
            "/users",
            json={
                "id": alice["id"],
                "username": "alice",
                "roles": ["Employee"],
                "active": True,
                "password": "new-pass",
            },
        )
        assert response.status_code == 200

        async with db_session_factory() as session:
            user = (await session.execute(select(User))).scalar_one()
        hasher = PasswordService(rounds=4)
        assert hasher.verify_sync("new-pass", user.password)
        assert not hasher.verify_sync("old-pass", user.password)

    @pytest.mark.asyncio
    async def test_update_unknown_user(self, test_client):
        response = await test_client.patch(
            "/users",
            json={"id": str(uuid.uuid4()), "username": "x", "roles": ["Employee"], "active": True},
        )

        assert response.status_code == 400
        assert response.json()["message"] == "User not found"

    @pytest.mark.asyncio
    async def test_update_requires_boolean_active(self, test_client, create_user):
        alice = await create_user("alice")

        response = await test_client.patch(
            "/users",
            json={"id": alice["id"], "username": "alice", "roles": ["Employee"], "active": "yes"},
        )

        assert response.status_code == 400
        assert response.json()["error"] == "validation_error"


class TestDeleteUser:

    @pytest.mark.asyncio
    async def test_delete_user_without_notes(self, test_client, db_session_factory, create_user):
        alice = await create_user("alice")

        response = await test_client.request("DELETE", "/users", json={"id": alice["id"]})

        assert response.status_code == 200
        assert response.json() == {"message": f"Username alice with ID {alice['id']} deleted"}
        assert await count_users(db_session_factory) == 0

    @pytest.mark.asyncio
    async def test_delete_user_with_notes_rejected(self, test_client, db_session_factory, create_user):
        alice = await create_user("alice")
        created = await test_client.post(
            "/notes", json={"user": alice["id"], "title": "Fix printer", "text": "Floor 2"}
        )
        assert created.status_code == 201

        response = await test_client.request("DELETE", "/users", json={"id": alice["id"]})

        assert response.status_code == 400
        assert response.json()["message"] == "User has assigned notes"
        assert await count_users(db_session_factory) == 1

    @pytest.mark.asyncio
    async def test_delete_requires_id(self, test_client):
        response = await test_client.request("DELETE", "/users", json={})

        assert response.status_code == 400
        assert response.json()["message"] == "User ID required"

    @pytest.mark.asyncio
    async def test_delete_unknown_user(self, test_client):
        response = await test_client.request("DELETE", "/users", json={"id": str(uuid.uuid4())})

        assert response.status_code == 400
        assert response.json()["message"] == "User not found"
