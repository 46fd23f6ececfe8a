from __future__ import annotations

import pytest

from apex_chat.services import read_state_service
from tests.conftest import make_conversation, make_message


@pytest.fixture
def seeded(store):
    store.conversations.extend([
        make_conversation(),
        make_conversation("u1", "u2", conversation_id="conv_Y"),
    ])
    store.messages.extend([
        make_message(message_id="msg_1", sender_id="u1", receiver_id="u2"),
        make_message(message_id="msg_2", sender_id="u1", receiver_id="u2"),
        make_message(message_id="msg_3", sender_id="u2", receiver_id="u1"),
        make_message(message_id="msg_4", conversation_id="conv_Y", sender_id="u1", receiver_id="u2"),
    ])
    return store


@pytest.mark.asyncio
async def test_marks_only_messages_received_by_caller(bob, uow, seeded, clock):
    result = await read_state_service.mark_messages_read(
        "conv_X", bob, ["msg_1", "msg_2", "msg_3", "msg_4", "msg_missing"], uow, clock,
    )

    assert result.updated_ids == ["msg_1", "msg_2"]
    assert result.requested_ids == ["msg_1", "msg_2", "msg_3", "msg_4", "msg_missing"]
    read = {m.id: m.read_at for m in seeded.messages}
    assert read["msg_1"] is not None
    assert read["msg_2"] is not None
    assert read["msg_3"] is None
    assert read["msg_4"] is None


@pytest.mark.asyncio
async def test_marking_twice_is_a_noop(bob, uow, seeded, clock):
    first = await read_state_service.mark_messages_read("conv_X", bob, ["msg_1"], uow, clock)
    read_at = seeded.messages[0].read_at

    second = await read_state_service.mark_messages_read("conv_X", bob, ["msg_1"], uow, clock)

    assert first.updated_ids == ["msg_1"]
    assert second.updated_ids == []
    assert seeded.messages[0].read_at == read_at


@pytest.mark.asyncio
async def test_sender_cannot_mark_own_message(alice, uow, seeded):
    result = await read_state_service.mark_messages_read("conv_X", alice, ["msg_1"], uow)

    assert result.updated == []
    assert seeded.messages[0].read_at is None
