from __future__ import annotations

import pytest

from src.workday_bot.workday_bot.core.exceptions import StoreUnavailable
from src.workday_bot.workday_bot.core.enums import RequestStatus
from src.workday_bot.workday_bot.main import create_app
from tests.fakes import FakeStore

ADMIN_ROLE = "900"
PM_ROLE = "800"


@pytest.fixture()
def store():
    return FakeStore()


@pytest.fixture()
def client(store, monkeypatch):
    monkeypatch.setenv("APP_ENV", "testing")
    app = create_app(container=store.container)
    app.config["ADMIN_ROLE_IDS"] = frozenset({ADMIN_ROLE})
    app.config["PM_ROLE_IDS"] = frozenset({PM_ROLE})
    return app.test_client()


def command(name, *, user_id="1", username="alice", roles=(), options=None, resolved=None):
    data = {"name": name, "options": [{"name": k, "value": v} for k, v in (options or {}).items()]}
    if resolved:
        data["resolved"] = {"users": {uid: {"id": uid, "username": n} for uid, n in resolved.items()}}
    return {
        "type": 2,
        "member": {"user": {"id": user_id, "username": username}, "roles": list(roles)},
        "data": data,
    }


def post(client, payload):
    resp = client.post("/interactions", json=payload)
    assert resp.status_code == 200
    return resp.get_json()


def test_ping_is_answered_with_pong(client):
    assert post(client, {"type": 1}) == {"type": 1}


def test_other_interaction_types_are_not_found(client):
    assert client.post("/interactions", json={"type": 3}).status_code == 404


def test_clock_in_registers_actor_and_replies_publicly(client, store):
    body = post(client, command("clock-in", options={"location": "home"}))

    assert body["type"] == 4
    assert "alice clocked in (home)" in body["data"]["content"]
    assert "flags" not in body["data"]
    assert store.users.get_by_id("1").display_name == "alice"


def test_domain_errors_are_ephemeral(client):
    post(client, command("wfo"))
    body = post(client, command("clock-in"))

    assert body["data"]["flags"] == 64
    assert body["data"]["content"] == "You are already clocked in"


def test_unknown_command(client):
    body = post(client, command("dance"))
    assert body["data"] == {"content": "Unknown command", "flags": 64}


def test_pm_commands_need_pm_role(client, store):
    store.balances.put("1", total=10)
    post(client, command("vacation-request", options={"start_date": "2026-05-04", "end_date": "2026-05-08", "working_days": 5}))

    denied = post(client, command("pm-approve", user_id="2", username="bob", options={"request_id": 1}))
    assert denied["data"]["flags"] == 64
    assert store.requests.get(request_id=1).status == RequestStatus.PENDING

    ok = post(client, command("pm-approve", user_id="2", username="bob", roles=[PM_ROLE], options={"request_id": 1}))
    assert "pm_approved" in ok["data"]["content"]


def test_admin_is_also_allowed_pm_commands(client):
    body = post(client, command("pm-pending", roles=[ADMIN_ROLE]))
    assert "Nothing to review" in body["data"]["content"]


def test_admin_set_balance_registers_target(client, store):
    body = post(
        client,
        command(
            "admin-set-balance",
            roles=[ADMIN_ROLE],
            options={"user": "7", "days": 20},
            resolved={"7": "gina"},
        ),
    )

    assert "gina" in body["data"]["content"]
    assert store.balances.get("7").total_days == 20
    assert store.users.get_by_id("7").display_name == "gina"


def test_admin_commands_reject_pm(client, store):
    body = post(client, command("admin-add-days", roles=[PM_ROLE], options={"user": "7", "days": 2}))
    assert body["data"]["flags"] == 64
    assert store.balances.get("7") is None


def test_vacation_status_without_balance(client):
    body = post(client, command("vacation-status"))
    assert "No vacation balance yet" in body["data"]["content"]
    assert body["data"]["flags"] == 64


def test_bad_option_values_are_reported(client):
    body = post(client, command("vacation-request", options={"start_date": "tomorrow", "end_date": "2026-05-08", "working_days": 1}))
    assert body["data"]["flags"] == 64
    assert "tomorrow" in body["data"]["content"]


def test_unknown_report_type(client):
    body = post(client, command("report", options={"type": "astrology"}))
    assert body["data"]["flags"] == 64


def test_status_team_overview(client):
    post(client, command("clock-in"))
    body = post(client, command("status", options={"type": "team-overview"}))
    assert "Online: 1" in body["data"]["content"]


def test_store_failure_renders_generic_message(client, store):
    def broken(**kwargs):
        raise StoreUnavailable("db down")

    store.users.upsert = broken

    body = post(client, command("clock-out"))

    assert body["data"]["flags"] == 64
    assert body["data"]["content"] == "Something went wrong, please try again later"


def test_remind_records_intent(client, store):
    body = post(
        client,
        command("remind", options={"user": "5", "message": "lunch", "when": 30}, resolved={"5": "eve"}),
    )

    assert "alice set a reminder for eve" in body["data"]["content"]
    assert store.audit.entries[-1].details["target_user"] == "5"


@pytest.mark.parametrize(
    "name,days",
    [
        ("admin-add-days", 0),
        ("admin-remove-days", 101),
        ("admin-set-balance", 366),
    ],
)
def test_balance_command_day_limits(client, store, name, days):
    store.balances.put("7", total=10)

    body = post(client, command(name, roles=[ADMIN_ROLE], options={"user": "7", "days": days}))

    assert body["data"]["flags"] == 64
    assert "between" in body["data"]["content"]
    assert store.balances.get("7").total_days == 10


def test_time_log_days_limit(client):
    body = post(client, command("time-log", options={"days": 31}))
    assert body["data"] == {"content": "Days must be between 1 and 30", "flags": 64}


def test_role_denial_message(client):
    body = post(client, command("admin-approve", options={"request_id": 1}))
    assert body["data"] == {"content": "Only administrators can use this command", "flags": 64}
