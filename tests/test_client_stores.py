"""Client-side stores driven against the Flask app through a session adapter."""

from __future__ import annotations

from datetime import timedelta

import pytest
import requests

from wealthwise.client import (
    DEFAULT_DASHBOARD,
    AccountStore,
    ApiClient,
    ApiRequestError,
    BillStore,
    DashboardStore,
    GoalStore,
    NotificationStore,
    TransactionStore,
)
from wealthwise.models import utcnow

BASE_URL = "http://wealthwise.test/api"


class _Response:
    def __init__(self, response):
        self._response = response
        self.status_code = response.status_code
        self.ok = response.status_code < 400

    def json(self):
        body = self._response.get_json(silent=True)
        if body is None:
            raise ValueError("not JSON")
        return body


class FlaskSession:
    """Stands in for ``requests.Session`` by replaying calls on the test client."""

    def __init__(self, test_client):
        self.test_client = test_client

    def request(self, method, url, *, headers, json, params, files, data, timeout):
        path = "/api" + url[len(BASE_URL):]
        response = self.test_client.open(
            path, method=method, headers=headers, json=json, query_string=params
        )
        return _Response(response)


class DownSession:
    def request(self, *args, **kwargs):
        raise requests.ConnectionError("refused")


@pytest.fixture
def api(client):
    api = ApiClient(BASE_URL, session=FlaskSession(client))
    api.register("store@example.com", "Passw0rd!", {"firstName": "Store"})
    return api


def test_register_keeps_tokens(api):
    assert api.token
    assert api.refresh_token
    me = api.get("/auth/me")
    assert me["profile"]["firstName"] == "Store"


def test_refresh_replaces_access_token(api):
    api.token = None
    api.refresh()
    assert api.get("/auth/me")["email"] == "store@example.com"


def test_logout_clears_tokens(api):
    api.logout()
    assert api.token is None
    with pytest.raises(ApiRequestError) as excinfo:
        api.get("/auth/me")
    assert excinfo.value.status == 401


def test_validation_errors_surface(api):
    with pytest.raises(ApiRequestError) as excinfo:
        api.post("/accounts", json={"type": "checking"})

    assert excinfo.value.status == 400
    assert excinfo.value.message == "Validation failed"
    assert excinfo.value.errors[0]["field"] == "name"


def test_connection_failure_is_wrapped():
    api = ApiClient(BASE_URL, session=DownSession())

    with pytest.raises(ApiRequestError, match="Connection failed"):
        api.get("/health")


def test_account_store_lifecycle(api):
    store = AccountStore(api)

    created = store.create({"name": "Checking", "type": "checking", "balance": 100})
    assert created.success
    account_id = created.data["id"]

    assert store.set_balance(account_id, 50).success
    assert store.items[0]["balance"] == 50

    assert store.fetch_summary().data["totalBalance"] == 50
    assert store.delete(account_id).success
    assert store.items == []

    failed = store.update(account_id, {"name": "Gone"})
    assert not failed.success
    assert failed.error == "Account not found"
    assert store.error == "Account not found"


def test_transaction_store_keeps_pagination(api):
    account = AccountStore(api).create({"name": "Main", "type": "checking"}).data
    store = TransactionStore(api)
    for amount in (5, 6, 7):
        store.create(
            {"accountId": account["id"], "type": "expense", "amount": amount, "category": "Food"}
        )

    result = store.fetch(limit=2)

    assert result.success
    assert len(store.items) == 2
    assert store.pagination["total"] == 3
    assert store.fetch_summary().data["summary"]["expense"]["count"] == 3


def test_goal_and_bill_stores(api):
    goals = GoalStore(api)
    goal = goals.create(
        {
            "name": "Trip",
            "targetAmount": 100,
            "targetDate": (utcnow() + timedelta(days=30)).isoformat(),
        }
    ).data
    goals.contribute(goal["id"], 25)
    assert goals.items[0]["currentAmount"] == 25

    bills = BillStore(api)
    bill = bills.create(
        {
            "name": "Water",
            "amount": 30,
            "dueDate": (utcnow() + timedelta(days=5)).isoformat(),
            "frequency": "monthly",
        }
    ).data
    paid = bills.pay(bill["id"])

    assert paid.success
    assert [b["isPaid"] for b in bills.items] == [True, False]


def test_dashboard_store_falls_back_to_defaults():
    store = DashboardStore(ApiClient(BASE_URL, session=DownSession()))
    store.data = {"overview": {"totalBalance": 99}}

    result = store.fetch()

    assert not result.success
    assert store.data == DEFAULT_DASHBOARD
    assert store.data is not DEFAULT_DASHBOARD
    assert store.error.startswith("Connection failed")


def test_dashboard_store_reads_server(api):
    store = DashboardStore(api)

    assert store.fetch().success
    assert store.data["overview"]["accountCount"] == 0
    assert store.fetch_view().data["kind"] == "individual"
    assert store.fetch_analytics(period=7).data["period"] == 7


def test_notification_store_rest_actions(api):
    api.post("/notifications", json={"title": "A", "message": "first"})
    api.post("/notifications", json={"title": "B", "message": "second"})
    store = NotificationStore(api)

    assert store.fetch().success
    assert store.unread_count == 2
    newest = store.notifications[0]["id"]

    store.mark_read(newest)
    # The server echo of the same read must not decrement twice
    store.apply_event("notification:read", {"id": newest})
    assert store.unread_count == 1

    store.mark_all_read()
    assert store.unread_count == 0
    assert store.fetch_unread_count().data == {"count": 0}

    assert store.delete(newest).success
    assert [n["title"] for n in store.notifications] == ["A"]


def test_apply_event_is_idempotent():
    store = NotificationStore(ApiClient(BASE_URL, session=DownSession()))
    note = {"id": 1, "title": "Hi", "isRead": False}

    store.apply_event("notification:new", note)
    store.apply_event("notification:new", note)
    assert store.unread_count == 1

    store.apply_event("notification:read", {"id": 1})
    store.apply_event("notification:read", {"id": 1})
    assert store.unread_count == 0

    store.apply_event("bill:paid", {"id": 4})
    assert store.domain_events == [("bill:paid", {"id": 4})]


def test_dispatcher_applies_events_in_order():
    store = NotificationStore(ApiClient(BASE_URL, session=DownSession()))
    store.start_dispatcher()

    store.enqueue("notification:new", {"id": 1, "isRead": False})
    store.enqueue("notification:new", {"id": 2, "isRead": False})
    store.enqueue("notification:readAll", {"count": 2})
    store.enqueue("notification:new", None)  # malformed, logged and skipped
    store.enqueue("goal:deleted", {"id": 3})
    store.stop_dispatcher()

    assert [n["id"] for n in store.notifications] == [2, 1]
    assert store.unread_count == 0
    assert store.domain_events == [("goal:deleted", {"id": 3})]


class FakeSocket:
    def __init__(self):
        self.handlers = {}
        self.connected_with = None

    def on(self, event, handler):
        self.handlers[event] = handler

    def connect(self, url, auth, transports):
        self.connected_with = (url, auth)
        self.handlers["connect"]()

    def disconnect(self):
        self.handlers["disconnect"]()


def test_connect_relays_socket_events():
    store = NotificationStore(ApiClient(BASE_URL, session=DownSession()))
    sock = FakeSocket()

    store.connect("http://wealthwise.test", "tok", client=sock)
    assert store.connected
    assert sock.connected_with == ("http://wealthwise.test", {"token": "tok"})

    sock.handlers["notification:new"]({"id": 9, "isRead": False})
    store.disconnect()

    assert not store.connected
    assert store.unread_count == 1
