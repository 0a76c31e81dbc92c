# mypy: ignore-errors
# tests/v1/test_conversations.py
"""Tests for conversations, messages, read tracking, blocking and typing."""

from fastapi import status

from crush_confessions.models import (
    Confession,
    Conversation,
    ConversationStatus,
    Message,
    UserBlock,
)
from tests.factories import make_confession, make_conversation, make_message


def test_create_conversation_is_order_independent(
    client, db_session, test_user, other_user, auth_token, other_auth_token
) -> None:
    """(A, B) and (B, A) resolve to the same conversation."""
    first = client.post(
        "/api/v1/conversations",
        json={"targetUserId": other_user.id},
        headers=auth_token,
    )
    assert first.status_code == status.HTTP_200_OK
    assert first.json()["alreadyExists"] is False

    second = client.post(
        "/api/v1/conversations",
        json={"targetUserId": test_user.id},
        headers=other_auth_token,
    )
    assert second.json()["alreadyExists"] is True
    assert second.json()["conversationId"] == first.json()["conversationId"]
    assert db_session.query(Conversation).count() == 1


def test_create_conversation_with_self_fails(client, test_user, auth_token) -> None:
    response = client.post(
        "/api/v1/conversations",
        json={"targetUserId": test_user.id},
        headers=auth_token,
    )
    assert response.status_code == status.HTTP_400_BAD_REQUEST


def test_create_conversation_unknown_user(client, auth_token) -> None:
    response = client.post(
        "/api/v1/conversations",
        json={"targetUserId": "missing"},
        headers=auth_token,
    )
    assert response.status_code == status.HTTP_404_NOT_FOUND


def test_send_message(client, db_session, test_user, other_user, other_auth_token) -> None:
    conversation = make_conversation(db_session, test_user, other_user)

    sent = client.post(
        f"/api/v1/conversations/{conversation.id}/messages",
        json={"content": "hey there"},
        headers=other_auth_token,
    )
    assert sent.status_code == status.HTTP_201_CREATED
    body = sent.json()
    assert body["message"] == "Message sent"
    assert body["sentMessage"]["content"] == "hey there"
    assert body["sentMessage"]["readStatus"] is False
    assert body["sentMessage"]["isCurrentUser"] is True
    assert body["sentMessage"]["sender"]["displayName"] == "Bob"


def test_list_messages_marks_read(
    client, db_session, test_user, other_user, auth_token
) -> None:
    """Fetching messages marks the other side's messages read and zeroes the unread count."""
    conversation = make_conversation(db_session, test_user, other_user)
    make_message(db_session, conversation, other_user, "hey there")
    make_message(db_session, conversation, other_user, "second", minutes=5)

    listing = client.get("/api/v1/conversations", headers=auth_token).json()
    assert listing["totalUnreadMessages"] == 2
    assert listing["conversations"][0]["unreadCount"] == 2
    assert listing["conversations"][0]["lastMessage"]["content"] == "second"
    assert listing["conversations"][0]["otherUser"]["displayName"] == "Bob"

    unread = client.get("/api/v1/conversations/unread", headers=auth_token).json()
    assert unread["totalUnreadMessages"] == 2

    messages = client.get(
        f"/api/v1/conversations/{conversation.id}/messages", headers=auth_token
    ).json()["messages"]
    assert [m["content"] for m in messages] == ["hey there", "second"]
    assert all(m["isCurrentUser"] is False for m in messages)
    # Entries report the state before this fetch marked them read.
    assert [m["readStatus"] for m in messages] == [False, False]

    again = client.get(
        f"/api/v1/conversations/{conversation.id}/messages", headers=auth_token
    ).json()["messages"]
    assert [m["readStatus"] for m in again] == [True, True]

    listing = client.get("/api/v1/conversations", headers=auth_token).json()
    assert listing["conversations"][0]["unreadCount"] == 0
    assert listing["totalUnreadMessages"] == 0
    assert db_session.query(Message).filter(Message.read_status.is_(False)).count() == 0


def test_listing_messages_leaves_own_messages_unread(
    client, db_session, test_user, other_user, auth_token, other_auth_token
) -> None:
    conversation = make_conversation(db_session, test_user, other_user)
    make_message(db_session, conversation, test_user, "mine")

    client.get(f"/api/v1/conversations/{conversation.id}/messages", headers=auth_token)
    db_session.expire_all()
    assert db_session.query(Message).one().read_status is False

    other_unread = client.get("/api/v1/conversations/unread", headers=other_auth_token).json()
    assert other_unread["totalUnreadMessages"] == 1


def test_message_content_limits(client, db_session, test_user, other_user, auth_token) -> None:
    conversation = make_conversation(db_session, test_user, other_user)
    for content in ("", "z" * 1001):
        response = client.post(
            f"/api/v1/conversations/{conversation.id}/messages",
            json={"content": content},
            headers=auth_token,
        )
        assert response.status_code == status.HTTP_400_BAD_REQUEST


def test_non_participant_cannot_read_or_send(
    client, db_session, test_user, other_user, third_auth_token
) -> None:
    conversation = make_conversation(db_session, test_user, other_user)

    read = client.get(f"/api/v1/conversations/{conversation.id}/messages", headers=third_auth_token)
    assert read.status_code == status.HTTP_403_FORBIDDEN

    send = client.post(
        f"/api/v1/conversations/{conversation.id}/messages",
        json={"content": "intruder"},
        headers=third_auth_token,
    )
    assert send.status_code == status.HTTP_403_FORBIDDEN


def test_send_to_missing_conversation(client, auth_token) -> None:
    response = client.post(
        "/api/v1/conversations/missing/messages",
        json={"content": "anyone?"},
        headers=auth_token,
    )
    assert response.status_code == status.HTTP_404_NOT_FOUND


def test_block_is_symmetric_and_toggles(
    client, db_session, test_user, other_user, auth_token, other_auth_token
) -> None:
    """A block from either side stops both participants; status follows the OR of both blocks."""
    conversation = make_conversation(db_session, test_user, other_user)
    url = f"/api/v1/conversations/{conversation.id}"

    blocked = client.post(f"{url}/block", headers=auth_token).json()
    assert blocked["isBlocked"] is True
    assert blocked["status"] == "BLOCKED"

    for headers in (auth_token, other_auth_token):
        response = client.post(f"{url}/messages", json={"content": "hi"}, headers=headers)
        assert response.status_code == status.HTTP_403_FORBIDDEN

    assert client.get("/api/v1/conversations", headers=other_auth_token).json()["conversations"] == []

    details = client.get(f"{url}/details", headers=other_auth_token).json()
    assert details["isBlocked"] is False
    assert details["isBlockedBy"] is True
    assert details["canMessage"] is False

    # Bob blocks too, then Alice lifts hers: still blocked by Bob.
    client.post(f"{url}/block", headers=other_auth_token)
    lifted = client.post(f"{url}/block", headers=auth_token).json()
    assert lifted["isBlocked"] is False
    assert lifted["status"] == "BLOCKED"

    cleared = client.post(f"{url}/block", headers=other_auth_token).json()
    assert cleared["status"] == "ACTIVE"
    assert db_session.query(UserBlock).count() == 0

    ok = client.post(f"{url}/messages", json={"content": "hi again"}, headers=auth_token)
    assert ok.status_code == status.HTTP_201_CREATED


def test_conversation_details(
    client, db_session, test_user, third_user, auth_token
) -> None:
    conversation = make_conversation(db_session, test_user, third_user)
    details = client.get(
        f"/api/v1/conversations/{conversation.id}/details", headers=auth_token
    ).json()
    assert details["status"] == "ACTIVE"
    assert details["currentUser"]["id"] == test_user.id
    assert details["otherUser"] == {
        "id": third_user.id,
        "displayName": "carol",
        "profilePicture": None,
    }
    assert details["canMessage"] is True


def test_delete_conversation_removes_messages(
    client, db_session, test_user, other_user, auth_token, presence
) -> None:
    """Deletion removes every message, the conversation, its presence and confession link."""
    conversation = make_conversation(db_session, test_user, other_user)
    make_message(db_session, conversation, test_user, "one")
    make_message(db_session, conversation, other_user, "two", minutes=1)
    confession = make_confession(db_session, test_user, other_user)
    confession.sender_revealed = True
    confession.receiver_revealed = True
    confession.chat_channel_id = conversation.id
    db_session.commit()
    presence.record_typing(conversation.id, other_user.id)

    response = client.delete(f"/api/v1/conversations/{conversation.id}", headers=auth_token)
    assert response.status_code == status.HTTP_200_OK

    db_session.expire_all()
    assert db_session.query(Message).filter(Message.conversation_id == conversation.id).count() == 0
    assert db_session.get(Conversation, conversation.id) is None
    assert db_session.get(Confession, confession.id).chat_channel_id is None
    assert presence.active_typers(conversation.id, excluding=test_user.id) == []


def test_only_participant_can_delete(
    client, db_session, test_user, other_user, third_auth_token
) -> None:
    conversation = make_conversation(db_session, test_user, other_user)
    response = client.delete(f"/api/v1/conversations/{conversation.id}", headers=third_auth_token)
    assert response.status_code == status.HTTP_403_FORBIDDEN
    assert db_session.query(Conversation).count() == 1


def test_typing_presence_round_trip(
    client, db_session, test_user, other_user, auth_token, other_auth_token, fake_clock
) -> None:
    """A typer is visible to the other participant for three seconds, never to themselves."""
    conversation = make_conversation(db_session, test_user, other_user)
    url = f"/api/v1/conversations/{conversation.id}/typing"

    assert client.post(url, headers=auth_token).status_code == status.HTTP_200_OK

    seen = client.get(url, headers=other_auth_token).json()
    assert seen == {"isTyping": True, "typingUsers": [{"id": test_user.id, "displayName": "Alice"}]}

    own = client.get(url, headers=auth_token).json()
    assert own == {"isTyping": False, "typingUsers": []}

    fake_clock.advance(3.5)
    expired = client.get(url, headers=other_auth_token).json()
    assert expired["isTyping"] is False


def test_typing_requires_participant(
    client, db_session, test_user, other_user, third_auth_token
) -> None:
    conversation = make_conversation(db_session, test_user, other_user)
    url = f"/api/v1/conversations/{conversation.id}/typing"
    assert client.post(url, headers=third_auth_token).status_code == status.HTTP_403_FORBIDDEN
    assert client.get(url, headers=third_auth_token).status_code == status.HTTP_403_FORBIDDEN


def test_blocked_conversation_excluded_from_unread(
    client, db_session, test_user, other_user, auth_token
) -> None:
    conversation = make_conversation(db_session, test_user, other_user)
    make_message(db_session, conversation, other_user, "before block")
    conversation.status = ConversationStatus.BLOCKED
    db_session.commit()

    unread = client.get("/api/v1/conversations/unread", headers=auth_token).json()
    assert unread["totalUnreadMessages"] == 0
