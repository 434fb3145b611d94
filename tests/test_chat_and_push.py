import pytest

from app.core.config import settings
from app.core.push_client import PushSubscriptionGone
from app.services.push import push_service

SUBSCRIPTION = {"endpoint": "https://push.example/endpoint", "keys": {"p256dh": "p256dh-key", "auth": "auth-key"}}


@pytest.fixture
def push_enabled(monkeypatch):
    monkeypatch.setattr(settings, "VAPID_PUBLIC_KEY", "public-vapid-key")
    monkeypatch.setattr(settings, "VAPID_PRIVATE_KEY", "private-vapid-key")


@pytest.fixture
def sent(monkeypatch):
    deliveries = []

    async def fake_send_push(endpoint, p256dh, auth, payload):
        deliveries.append((endpoint, payload))

    monkeypatch.setattr(push_service, "send_push", fake_send_push)
    return deliveries


async def test_only_members_can_read_and_post(client, headers_for, create_activity, verify_user):
    await verify_user("C")
    await verify_user("outsider")
    activity = await create_activity("C")
    url = f"/api/activities/{activity['id']}/messages"

    response = await client.post(url, json={"content": "hello"}, headers=headers_for("outsider"))
    assert response.status_code == 403
    assert response.json()["detail"] == "Not a member of this activity"
    assert (await client.get(url, headers=headers_for("outsider"))).status_code == 403

    response = await client.post(url, json={"content": "Bom dia"}, headers=headers_for("C"))
    assert response.status_code == 201
    assert response.json()["content"] == "Bom dia"


async def test_messages_come_back_in_order_with_author(client, headers_for, save_profile, create_activity, verify_user):
    await save_profile("C", "Carla", photo_url="https://img.example/c.png")
    await verify_user("C")
    await verify_user("A")
    activity = await create_activity("C")
    url = f"/api/activities/{activity['id']}/messages"
    await client.post(f"/api/activities/{activity['id']}/join", headers=headers_for("A"))

    await client.post(url, json={"content": "first"}, headers=headers_for("C"))
    await client.post(url, json={"content": "second"}, headers=headers_for("A"))

    messages = (await client.get(url, headers=headers_for("A"))).json()
    assert [m["content"] for m in messages] == ["first", "second"]
    assert messages[0]["display_name"] == "Carla"
    assert messages[0]["photo_url"] == "https://img.example/c.png"
    assert messages[1]["display_name"] == "Peregrino"
    assert messages[1]["photo_url"] == ""


async def test_unverified_member_cannot_post(client, headers_for, create_activity):
    activity = await create_activity("C")
    url = f"/api/activities/{activity['id']}/messages"
    await client.post(f"/api/activities/{activity['id']}/join", headers=headers_for("A"))

    response = await client.post(url, json={"content": "Olá"}, headers=headers_for("A"))
    assert response.status_code == 403
    assert response.json()["detail"] == "Identity verification required"
    # reading stays open to every member
    assert (await client.get(url, headers=headers_for("A"))).json() == []


async def test_admin_posts_without_verification(client, admin_headers, create_activity):
    activity = await create_activity("admin-1")
    response = await client.post(
        f"/api/activities/{activity['id']}/messages", json={"content": "Bem-vindos"}, headers=admin_headers
    )
    assert response.status_code == 201


async def test_empty_message_is_rejected(client, headers_for, create_activity):
    activity = await create_activity("C")
    response = await client.post(
        f"/api/activities/{activity['id']}/messages", json={"content": ""}, headers=headers_for("C")
    )
    assert response.status_code == 422


async def test_new_message_notifies_other_members(
    client, headers_for, save_profile, create_activity, verify_user, push_enabled, sent
):
    await save_profile("A", "Ana")
    await verify_user("A")
    activity = await create_activity("C", title="Jantar")
    activity_id = activity["id"]
    await client.post(f"/api/activities/{activity_id}/join", headers=headers_for("A"))

    await client.post("/api/push/subscribe", json=SUBSCRIPTION, headers=headers_for("C"))
    await client.post("/api/push/subscribe", json=SUBSCRIPTION, headers=headers_for("A"))

    response = await client.post(
        f"/api/activities/{activity_id}/messages", json={"content": "x" * 150}, headers=headers_for("A")
    )
    assert response.status_code == 201

    assert len(sent) == 1
    _, payload = sent[0]
    assert payload["title"] == "Ana no Jantar"
    assert payload["body"] == "x" * 100


async def test_push_failure_does_not_fail_the_message(
    client, headers_for, create_activity, verify_user, push_enabled, monkeypatch
):
    await verify_user("A")
    activity = await create_activity("C")
    activity_id = activity["id"]
    await client.post(f"/api/activities/{activity_id}/join", headers=headers_for("A"))
    await client.post("/api/push/subscribe", json=SUBSCRIPTION, headers=headers_for("C"))

    async def broken_send_push(*args, **kwargs):
        raise RuntimeError("push service exploded")

    monkeypatch.setattr(push_service, "send_push", broken_send_push)

    response = await client.post(
        f"/api/activities/{activity_id}/messages", json={"content": "still delivered"}, headers=headers_for("A")
    )
    assert response.status_code == 201

    messages = (await client.get(f"/api/activities/{activity_id}/messages", headers=headers_for("C"))).json()
    assert [m["content"] for m in messages] == ["still delivered"]


async def test_gone_subscription_is_pruned(db, push_enabled, monkeypatch):
    from app.schemas.push.push import PushSubscriptionCreate

    await push_service.save_subscription(db, "A", PushSubscriptionCreate(**SUBSCRIPTION))

    async def gone_send_push(endpoint, *args, **kwargs):
        raise PushSubscriptionGone(endpoint)

    monkeypatch.setattr(push_service, "send_push", gone_send_push)

    delivered = await push_service.notify_users(db, ["A", "nobody"], {"title": "t", "body": "b"})
    assert delivered == 0
    assert await push_service.get_subscription(db, "A") is None


async def test_push_routes_without_configuration(client, headers_for):
    assert (await client.get("/api/push/vapid-key")).status_code == 503
    response = await client.post("/api/push/subscribe", json=SUBSCRIPTION, headers=headers_for("A"))
    assert response.status_code == 503


async def test_push_subscription_lifecycle(client, headers_for, push_enabled, sent):
    headers = headers_for("A")
    assert (await client.get("/api/push/vapid-key")).json() == {"public_key": "public-vapid-key"}
    assert (await client.get("/api/push/status", headers=headers)).json() == {"subscribed": False}

    response = await client.post("/api/push/test", headers=headers)
    assert response.status_code == 404

    await client.post("/api/push/subscribe", json=SUBSCRIPTION, headers=headers)
    assert (await client.get("/api/push/status", headers=headers)).json() == {"subscribed": True}

    response = await client.post("/api/push/test", headers=headers)
    assert response.json() == {"ok": True}
    assert len(sent) == 1

    await client.delete("/api/push/subscribe", headers=headers)
    assert (await client.get("/api/push/status", headers=headers)).json() == {"subscribed": False}
