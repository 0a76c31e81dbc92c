# mypy: ignore-errors
# tests/v1/test_match.py
"""Tests for confession reveals, comment reveals and mutual-match conversations."""

from fastapi import status

from crush_confessions.models import Comment, Confession, ConfessionStatus, Conversation, Visibility
from tests.factories import make_comment, make_confession, make_conversation


def _reveal(client, confession_id, headers):
    return client.post(f"/api/v1/confessions/{confession_id}/reveal", headers=headers)


def test_private_confession_reveal_walkthrough(
    client, db_session, test_user, other_user, auth_token, other_auth_token
) -> None:
    """Target reveals, then sender reveals: CONNECTED with one new conversation, repeat is a no-op."""
    created = client.post(
        "/api/v1/confessions",
        json={
            "content": "I really like you a lot!!",
            "targetUserEmail": "bob@umt.edu.pk",
            "visibility": "PRIVATE",
        },
        headers=auth_token,
    )
    assert created.status_code == status.HTTP_201_CREATED
    confession = created.json()["confession"]
    assert confession["status"] == "ACTIVE"
    assert confession["chatChannelId"] is None

    first = _reveal(client, confession["id"], other_auth_token)
    assert first.status_code == status.HTTP_200_OK
    data = first.json()
    assert data["status"] == "REVEALED"
    assert data["receiverRevealed"] is True
    assert data["senderRevealed"] is False
    assert data["mutualReveal"] is False
    assert data["conversationId"] is None

    second = _reveal(client, confession["id"], auth_token).json()
    assert second["status"] == "CONNECTED"
    assert second["senderRevealed"] is True
    assert second["receiverRevealed"] is True
    assert second["mutualReveal"] is True
    assert second["conversationAlreadyExists"] is False
    conversation_id = second["conversationId"]
    assert conversation_id

    stored = db_session.get(Confession, confession["id"])
    db_session.refresh(stored)
    assert stored.chat_channel_id == conversation_id

    again = _reveal(client, confession["id"], auth_token).json()
    assert again["status"] == "CONNECTED"
    assert again["conversationId"] == conversation_id
    assert again["conversationAlreadyExists"] is True
    assert db_session.query(Conversation).count() == 1

    feed = client.get(
        f"/api/v1/confessions?confessionId={confession['id']}", headers=other_auth_token
    ).json()["confessions"][0]
    assert feed["chatChannelId"] == conversation_id
    assert feed["senderName"] == "Alice"


def test_sender_first_reveal_order(
    client, db_session, test_user, other_user, auth_token, other_auth_token
) -> None:
    confession = make_confession(db_session, test_user, other_user, visibility=Visibility.PRIVATE)

    first = _reveal(client, confession.id, auth_token).json()
    assert first["status"] == "REVEALED"
    assert first["senderRevealed"] is True

    second = _reveal(client, confession.id, other_auth_token).json()
    assert second["status"] == "CONNECTED"
    assert second["conversationId"]


def test_mutual_reveal_reuses_existing_pair_conversation(
    client, db_session, test_user, other_user, auth_token, other_auth_token
) -> None:
    """A conversation stored in the opposite order is found and reused."""
    existing = make_conversation(db_session, other_user, test_user)
    confession = make_confession(db_session, test_user, other_user)

    _reveal(client, confession.id, auth_token)
    data = _reveal(client, confession.id, other_auth_token).json()

    assert data["conversationId"] == existing.id
    assert data["conversationAlreadyExists"] is True
    assert db_session.query(Conversation).count() == 1


def test_reveal_by_outsider_forbidden(
    client, db_session, test_user, other_user, third_auth_token
) -> None:
    confession = make_confession(db_session, test_user, other_user)
    response = _reveal(client, confession.id, third_auth_token)
    assert response.status_code == status.HTTP_403_FORBIDDEN


def test_self_targeted_reveal_fails_and_mutates_nothing(
    client, db_session, test_user, auth_token
) -> None:
    """Revealing on a confession addressed to oneself is a self action."""
    confession = make_confession(db_session, test_user, test_user)

    response = _reveal(client, confession.id, auth_token)
    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert response.json()["message"] == "You cannot reveal interest in your own confession"

    db_session.expire_all()
    stored = db_session.get(Confession, confession.id)
    assert stored.sender_revealed is False
    assert stored.receiver_revealed is False
    assert stored.status == ConfessionStatus.ACTIVE


def test_untargeted_reveal_stays_revealed(client, db_session, test_user, auth_token) -> None:
    confession = make_confession(db_session, test_user)
    data = _reveal(client, confession.id, auth_token).json()
    assert data["status"] == "REVEALED"
    assert data["conversationId"] is None
    assert db_session.query(Conversation).count() == 0


def test_reveal_missing_confession(client, auth_token) -> None:
    response = _reveal(client, "missing", auth_token)
    assert response.status_code == status.HTTP_404_NOT_FOUND


def _comment_reveal(client, comment_id, action, headers):
    return client.post(
        f"/api/v1/comments/{comment_id}/reveal",
        json={"action": action},
        headers=headers,
    )


def test_comment_reveal_request_and_approve(
    client, db_session, test_user, other_user, auth_token, other_auth_token
) -> None:
    """Author requests, confession owner approves, and a conversation connects them."""
    confession = make_confession(db_session, test_user)
    comment = make_comment(db_session, confession, other_user)

    requested = _comment_reveal(client, comment.id, "request", other_auth_token)
    assert requested.status_code == status.HTTP_200_OK
    assert requested.json()["revealRequested"] is True
    assert requested.json()["revealApproved"] is False

    repeat = _comment_reveal(client, comment.id, "request", other_auth_token)
    assert repeat.status_code == status.HTTP_200_OK
    assert repeat.json()["message"] == "Reveal already requested"

    approved = _comment_reveal(client, comment.id, "approve", auth_token)
    assert approved.status_code == status.HTTP_200_OK
    data = approved.json()
    assert data["revealApproved"] is True
    assert data["conversationAlreadyExists"] is False

    conversation = db_session.get(Conversation, data["conversationId"])
    assert conversation.has_participant(test_user.id)
    assert conversation.has_participant(other_user.id)

    listing = client.get(f"/api/v1/comments?confessionId={confession.id}", headers=auth_token)
    assert listing.json()["comments"][0]["user"]["displayName"] == "Bob"


def test_approve_without_request_is_invalid_state(
    client, db_session, test_user, other_user, auth_token
) -> None:
    confession = make_confession(db_session, test_user)
    comment = make_comment(db_session, confession, other_user)

    response = _comment_reveal(client, comment.id, "approve", auth_token)
    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert response.json()["message"] == "No reveal request is pending for this comment"

    db_session.expire_all()
    assert db_session.get(Comment, comment.id).reveal_approved is False
    assert db_session.query(Conversation).count() == 0


def test_only_author_requests_and_only_owner_approves(
    client, db_session, test_user, other_user, third_user, auth_token, third_auth_token
) -> None:
    confession = make_confession(db_session, test_user)
    comment = make_comment(db_session, confession, other_user, reveal_requested=True)

    request = _comment_reveal(client, comment.id, "request", auth_token)
    assert request.status_code == status.HTTP_403_FORBIDDEN

    approve = _comment_reveal(client, comment.id, "approve", third_auth_token)
    assert approve.status_code == status.HTTP_403_FORBIDDEN


def test_owner_approving_own_comment_creates_no_conversation(
    client, db_session, test_user, auth_token
) -> None:
    confession = make_confession(db_session, test_user)
    comment = make_comment(db_session, confession, test_user, reveal_requested=True)

    data = _comment_reveal(client, comment.id, "approve", auth_token).json()
    assert data["revealApproved"] is True
    assert data["conversationId"] is None
    assert db_session.query(Conversation).count() == 0


def test_comment_reveal_unknown_action(client, db_session, test_user, other_user, other_auth_token) -> None:
    confession = make_confession(db_session, test_user)
    comment = make_comment(db_session, confession, other_user)

    response = _comment_reveal(client, comment.id, "publish", other_auth_token)
    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert "action" in response.json()["errors"]
