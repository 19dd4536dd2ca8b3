"""
Arboriza Backend - Forum Tests
===============================

What we test:
    ✅ Room creation makes the creator a member, atomically
    ✅ Room list carries message counts
    ✅ Only members can post; joining is idempotent
    ✅ Message window: latest `limit` messages, oldest first
"""

from unittest.mock import MagicMock

import pytest
from sqlalchemy.exc import IntegrityError

from arboriza.exceptions import ForbiddenError, StoreError
from arboriza.models.forum import Message, Room, RoomMember
from arboriza.services.forum_service import ForumService


async def _post(client, room_id: int, sender_id: int, content: str):
    return await client.post(
        f"/api/rooms/{room_id}/messages",
        json={"sender_id": sender_id, "content": content},
    )


class TestRooms:

    @pytest.mark.asyncio
    async def test_create_room_adds_creator_as_member(self, client, make_user, row_count):
        creator = await make_user("ana")

        response = await client.post(
            "/api/rooms",
            json={"name": "Ipês", "description": "Floração", "creator_id": creator["id"]},
        )

        assert response.status_code == 201
        room = response.json()
        assert room["name"] == "Ipês"
        assert room["description"] == "Floração"
        assert room["creator_id"] == creator["id"]
        assert room["created_at"]
        assert await row_count(RoomMember) == 1

        # The creator can post straight away
        posted = await _post(client, room["id"], creator["id"], "Bem-vindos")
        assert posted.status_code == 201

    @pytest.mark.asyncio
    @pytest.mark.parametrize("payload", [{"creator_id": 1}, {"name": "Sem dono"}, {"name": "", "creator_id": 1}])
    async def test_create_room_requires_name_and_creator(self, client, row_count, payload):
        response = await client.post("/api/rooms", json=payload)

        assert response.status_code == 400
        assert response.json()["error"] == "validation_error"
        assert await row_count(Room) == 0

    @pytest.mark.asyncio
    async def test_list_rooms_with_message_counts(self, client, make_user, make_room):
        user = await make_user()
        quiet = await make_room(user["id"], name="Silêncio")
        busy = await make_room(user["id"], name="Movimentada")
        for text in ("um", "dois", "três"):
            await _post(client, busy["id"], user["id"], text)

        response = await client.get("/api/rooms")

        assert response.status_code == 200
        counts = {room["name"]: room["message_count"] for room in response.json()}
        assert counts == {"Silêncio": 0, "Movimentada": 3}
        # Newest room first
        assert [room["id"] for room in response.json()] == [busy["id"], quiet["id"]]


class TestMembership:

    @pytest.mark.asyncio
    async def test_non_member_cannot_post_until_joining(self, client, make_user, make_room, row_count):
        owner = await make_user("ana")
        visitor = await make_user("bruno")
        room = await make_room(owner["id"])

        denied = await _post(client, room["id"], visitor["id"], "Olá")

        assert denied.status_code == 403
        assert denied.json()["error"] == "forbidden"
        assert await row_count(Message) == 0

        joined = await client.post(f"/api/rooms/{room['id']}/join", json={"user_id": visitor["id"]})
        assert joined.status_code == 200
        assert joined.json()["message"] == "Successfully joined room"

        allowed = await _post(client, room["id"], visitor["id"], "Olá")
        assert allowed.status_code == 201
        message = allowed.json()
        assert message["room_id"] == room["id"]
        assert message["sender_id"] == visitor["id"]
        assert message["content"] == "Olá"
        assert message["timestamp"]

    @pytest.mark.asyncio
    async def test_join_twice_is_idempotent(self, client, make_user, make_room, row_count):
        owner = await make_user("ana")
        visitor = await make_user("bruno")
        room = await make_room(owner["id"])

        first = await client.post(f"/api/rooms/{room['id']}/join", json={"user_id": visitor["id"]})
        second = await client.post(f"/api/rooms/{room['id']}/join", json={"user_id": visitor["id"]})

        assert first.status_code == 200
        assert second.status_code == 200
        assert second.json()["message"] == "User is already a member"
        # Creator plus one joiner
        assert await row_count(RoomMember) == 2

    @pytest.mark.asyncio
    async def test_creator_join_reports_existing_membership(self, client, make_user, make_room):
        owner = await make_user("ana")
        room = await make_room(owner["id"])

        response = await client.post(f"/api/rooms/{room['id']}/join", json={"user_id": owner["id"]})

        assert response.json()["message"] == "User is already a member"

    @pytest.mark.asyncio
    async def test_join_requires_user_id(self, client):
        response = await client.post("/api/rooms/1/join", json={})

        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_send_requires_sender_and_content(self, client):
        response = await client.post("/api/rooms/1/messages", json={"sender_id": 1})

        assert response.status_code == 400


class TestMessages:

    @pytest.mark.asyncio
    async def test_limit_returns_latest_oldest_first(self, client, make_user, make_room):
        user = await make_user()
        room = await make_room(user["id"])
        for i in range(1, 6):
            await _post(client, room["id"], user["id"], f"m{i}")

        response = await client.get(f"/api/rooms/{room['id']}/messages", params={"limit": 2})

        assert response.status_code == 200
        assert [m["content"] for m in response.json()] == ["m4", "m5"]

    @pytest.mark.asyncio
    async def test_default_limit_returns_all_in_order(self, client, make_user, make_room):
        user = await make_user()
        room = await make_room(user["id"])
        other = await make_room(user["id"], name="Outra")
        for i in range(1, 4):
            await _post(client, room["id"], user["id"], f"m{i}")
        await _post(client, other["id"], user["id"], "fora")

        response = await client.get(f"/api/rooms/{room['id']}/messages")

        assert [m["content"] for m in response.json()] == ["m1", "m2", "m3"]

    @pytest.mark.asyncio
    async def test_empty_room(self, client):
        response = await client.get("/api/rooms/99/messages")

        assert response.status_code == 200
        assert response.json() == []

    @pytest.mark.asyncio
    async def test_invalid_limit_is_400(self, client):
        response = await client.get("/api/rooms/1/messages", params={"limit": 0})

        assert response.status_code == 400


class TestForumServiceStoreFailures:

    def setup_method(self):
        self.service = ForumService()

    @pytest.mark.asyncio
    async def test_membership_insert_failure_rolls_back_room(self, mock_db_session):
        """The room insert and the creator's membership fail together."""
        mock_db_session.flush.side_effect = [
            None,
            IntegrityError(
                "INSERT INTO room_members", {}, Exception('violates foreign key constraint "room_members_user_id_fkey"')
            ),
        ]

        with pytest.raises(StoreError) as exc_info:
            await self.service.create_room(mock_db_session, "Ipês", 42)

        error = exc_info.value
        assert error.expose_detail is True
        assert error.message == "Database operation failed"
        assert "room_members_user_id_fkey" in error.context["details"]

        # The transaction context saw the exception, so it rolled back
        transaction = mock_db_session.begin.return_value
        exc_type = transaction.__aexit__.await_args.args[0]
        assert exc_type is IntegrityError
        mock_db_session.commit.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_send_checks_membership_before_insert(self, mock_db_session):
        lookup = MagicMock()
        lookup.first.return_value = None
        mock_db_session.execute.return_value = lookup

        with pytest.raises(ForbiddenError):
            await self.service.send_message(mock_db_session, 1, 7, "oi")

        mock_db_session.add.assert_not_called()
