"""
TechNotes Backend - Note Service Unit Tests
=============================================

What:  Tests for NoteService validation, duplicate titles, tickets and listing.
How:   Mock DB sessions; each db.execute() call is answered in order.
"""

import uuid
from datetime import datetime, timezone
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import pytest

from conftest import scalar_result
from technotes.exceptions import ConflictError, NotFoundError, ValidationError
from technotes.models.note import TICKET_START, Note
from technotes.services.note_service import NoteService


def make_note(title="Fix printer", user_id=None, ticket=TICKET_START, **overrides):
    now = datetime.now(timezone.utc)
    fields = {
        "id": uuid.uuid4(),
        "user_id": user_id or uuid.uuid4(),
        "title": title,
        "text": "Paper jam on floor 2",
        "completed": False,
        "ticket": ticket,
        "created_at": now,
        "updated_at": now,
    }
    fields.update(overrides)
    return SimpleNamespace(**fields)


class TestNoteServiceList:

    def setup_method(self):
        self.service = NoteService()

    @pytest.mark.asyncio
    async def test_list_notes_attaches_usernames(self, mock_db_session):
        alice_id, ghost_id = uuid.uuid4(), uuid.uuid4()
        notes = [make_note("A", alice_id, 500), make_note("B", ghost_id, 501)]

        notes_result = MagicMock()
        notes_result.scalars.return_value.all.return_value = notes
        owners_result = MagicMock()
        owners_result.all.return_value = [SimpleNamespace(id=alice_id, username="alice")]
        mock_db_session.execute = AsyncMock(side_effect=[notes_result, owners_result])

        result = await self.service.list_notes(mock_db_session)

        assert [n.username for n in result] == ["alice", None]
        assert [n.ticket for n in result] == [500, 501]
        assert result[0].user == alice_id

    @pytest.mark.asyncio
    async def test_list_notes_empty_skips_owner_query(self, mock_db_session):
        notes_result = MagicMock()
        notes_result.scalars.return_value.all.return_value = []
        mock_db_session.execute.return_value = notes_result

        assert await self.service.list_notes(mock_db_session) == []
        assert mock_db_session.execute.await_count == 1


class TestNoteServiceCreate:

    def setup_method(self):
        self.service = NoteService()

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "user_id, title, text",
        [
            (None, "Title", "Text"),
            (uuid.uuid4(), "", "Text"),
            (uuid.uuid4(), "Title", None),
        ],
    )
    async def test_create_requires_all_fields(self, mock_db_session, user_id, title, text):
        with pytest.raises(ValidationError):
            await self.service.create_note(mock_db_session, user_id, title, text)
        mock_db_session.add.assert_not_called()

    @pytest.mark.asyncio
    async def test_create_unknown_owner(self, mock_db_session):
        mock_db_session.execute.return_value = scalar_result(None)

        with pytest.raises(NotFoundError, match="User not found"):
            await self.service.create_note(mock_db_session, uuid.uuid4(), "Title", "Text")

    @pytest.mark.asyncio
    async def test_create_duplicate_title(self, mock_db_session):
        owner_id = uuid.uuid4()
        mock_db_session.execute = AsyncMock(
            side_effect=[scalar_result(owner_id), scalar_result(make_note("Title"))]
        )

        with pytest.raises(ConflictError, match="Duplicate note title"):
            await self.service.create_note(mock_db_session, owner_id, "Title", "Text")
        mock_db_session.add.assert_not_called()

    @pytest.mark.asyncio
    @pytest.mark.parametrize("current_max, expected", [(None, TICKET_START), (512, 513)])
    async def test_create_assigns_next_ticket(self, mock_db_session, current_max, expected):
        owner_id = uuid.uuid4()
        mock_db_session.execute = AsyncMock(
            side_effect=[scalar_result(owner_id), scalar_result(None), scalar_result(current_max)]
        )

        result = await self.service.create_note(mock_db_session, owner_id, "Title", "Text")

        assert result.message == "New note created"
        added = mock_db_session.add.call_args[0][0]
        assert isinstance(added, Note)
        assert added.ticket == expected
        assert added.user_id == owner_id


class TestNoteServiceUpdate:

    def setup_method(self):
        self.service = NoteService()

    @pytest.mark.asyncio
    async def test_update_requires_boolean_completed(self, mock_db_session):
        with pytest.raises(ValidationError):
            await self.service.update_note(
                mock_db_session, uuid.uuid4(), uuid.uuid4(), "T", "X", "yes"
            )

    @pytest.mark.asyncio
    async def test_update_keeps_own_title(self, mock_db_session):
        note = make_note("Fix printer")
        mock_db_session.execute = AsyncMock(side_effect=[scalar_result(note), scalar_result(note)])

        result = await self.service.update_note(
            mock_db_session, note.id, note.user_id, "Fix printer", "Done", True
        )

        assert result.message == "'Fix printer' updated"
        assert note.completed is True
        assert note.text == "Done"

    @pytest.mark.asyncio
    async def test_update_title_taken_by_other_note(self, mock_db_session):
        note = make_note("Fix printer")
        other = make_note("Order toner")
        mock_db_session.execute = AsyncMock(side_effect=[scalar_result(note), scalar_result(other)])

        with pytest.raises(ConflictError):
            await self.service.update_note(
                mock_db_session, note.id, note.user_id, "Order toner", "X", False
            )

    @pytest.mark.asyncio
    async def test_update_unknown_note(self, mock_db_session):
        mock_db_session.execute.return_value = scalar_result(None)

        with pytest.raises(NotFoundError, match="Note not found"):
            await self.service.update_note(
                mock_db_session, uuid.uuid4(), uuid.uuid4(), "T", "X", False
            )


class TestNoteServiceDelete:

    def setup_method(self):
        self.service = NoteService()

    @pytest.mark.asyncio
    async def test_delete_success(self, mock_db_session):
        note = make_note("Fix printer")
        mock_db_session.execute.return_value = scalar_result(note)

        result = await self.service.delete_note(mock_db_session, note.id)

        assert result.message == f"Note 'Fix printer' with ID {note.id} deleted"
        mock_db_session.delete.assert_awaited_once_with(note)

    @pytest.mark.asyncio
    async def test_delete_requires_id(self, mock_db_session):
        with pytest.raises(ValidationError, match="Note ID required"):
            await self.service.delete_note(mock_db_session, None)
