from __future__ import annotations

from wealthwise.extensions import socketio
from wealthwise.models import utcnow
from wealthwise.services.auth import issue_access_token
from wealthwise.sockets import emit_to_user, user_room


def _token(app_ctx, user):
    return issue_access_token(user, config=app_ctx.config, now=utcnow())


def test_user_room_name():
    assert user_room(7) == "user:7"


def test_connection_requires_valid_token(app, client):
    rejected = socketio.test_client(app, flask_test_client=client, auth={"token": "bogus"})
    assert not rejected.is_connected()

    anonymous = socketio.test_client(app, flask_test_client=client)
    assert not anonymous.is_connected()


def test_events_reach_only_the_owner(app, client, app_ctx, api_user, auth_headers):
    sock = socketio.test_client(
        app, flask_test_client=client, auth={"token": _token(app_ctx, api_user)}
    )
    assert sock.is_connected()

    client.post(
        "/api/notifications",
        json={"title": "Ping", "message": "Hello there"},
        headers=auth_headers,
    )
    emit_to_user(api_user.id + 1, "notification:new", {"id": 999})

    received = sock.get_received()
    assert [packet["name"] for packet in received] == ["notification:new"]
    assert received[0]["args"][0]["title"] == "Ping"

    sock.disconnect()
