from datetime import datetime, timedelta

from app.models.access.invite_code import InviteCode

TERMS = {"terms_version": "2025-01", "privacy_version": "2025-01"}


async def create_code(client, headers, **body):
    response = await client.post("/api/invites/create", json=body, headers=headers)
    assert response.status_code == 201, response.text
    return response.json()


async def test_onboarding_walks_through_every_status(client, headers_for, admin_headers):
    headers = headers_for("newbie", first_name="Nuno", last_name="Silva")

    status = (await client.get("/api/access/status", headers=headers)).json()
    assert status["status"] == "needs_invite"

    invite = await create_code(client, admin_headers)
    response = await client.post("/api/invites/validate", json={"code": invite["code"].lower()}, headers=headers)
    assert response.json() == {"valid": True}

    response = await client.post("/api/invites/redeem", json={"invite_code": invite["code"], **TERMS}, headers=headers)
    assert response.json() == {"ok": True}

    status = (await client.get("/api/access/status", headers=headers)).json()
    assert status["status"] == "active"
    assert status["is_admin"] is False
    assert status["profile"]["display_name"] == "Nuno Silva"
    assert status["profile"]["language"] == "pt-BR"


async def test_configured_admin_skips_invite(client, admin_headers):
    status = (await client.get("/api/access/status", headers=admin_headers)).json()
    assert status["status"] == "needs_profile"
    assert status["is_admin"] is True

    response = await client.post("/api/invites/redeem", json={"invite_code": "-", **TERMS}, headers=admin_headers)
    assert response.json() == {"ok": True}

    status = (await client.get("/api/access/status", headers=admin_headers)).json()
    assert status["status"] == "active"
    assert status["profile"]["is_admin"] is True
    assert status["profile"]["can_invite"] is True


async def test_single_use_invite_is_spent(client, headers_for, admin_headers):
    invite = await create_code(client, admin_headers)

    first = await client.post(
        "/api/invites/redeem", json={"invite_code": invite["code"], **TERMS}, headers=headers_for("first")
    )
    assert first.status_code == 200

    response = await client.post("/api/invites/validate", json={"code": invite["code"]}, headers=headers_for("second"))
    assert response.status_code == 400
    assert response.json()["detail"] == "invite_used"

    second = await client.post(
        "/api/invites/redeem", json={"invite_code": invite["code"], **TERMS}, headers=headers_for("second")
    )
    assert second.status_code == 400


async def test_validate_reports_why_a_code_is_unusable(client, headers_for, admin_headers, session_factory):
    headers = headers_for("someone")
    response = await client.post("/api/invites/validate", json={"code": "NOPE1234"}, headers=headers)
    assert response.json()["detail"] == "invalid_code"

    invite = await create_code(client, admin_headers)
    await client.post(f"/api/invites/{invite['id']}/disable", headers=admin_headers)
    response = await client.post("/api/invites/validate", json={"code": invite["code"]}, headers=headers)
    assert response.json()["detail"] == "invite_disabled"

    async with session_factory() as session:
        session.add(InviteCode(code="OLDCODE1", created_by="admin-1", expires_at=datetime.utcnow() - timedelta(days=1)))
        await session.commit()
    response = await client.post("/api/invites/validate", json={"code": "OLDCODE1"}, headers=headers)
    assert response.json()["detail"] == "invite_expired"


async def test_invite_permissions(client, headers_for, admin_headers, save_profile):
    response = await client.post("/api/invites/create", json={}, headers=headers_for("pilgrim"))
    assert response.status_code == 403
    assert (await client.get("/api/invites/mine", headers=headers_for("pilgrim"))).json() == []
    assert (await client.get("/api/invites", headers=headers_for("pilgrim"))).status_code == 403

    await save_profile("pilgrim", "Paula")
    response = await client.post(
        "/api/admin/grant-invite", json={"user_id": "pilgrim"}, headers=admin_headers
    )
    assert response.json() == {"ok": True}

    invite = await create_code(client, headers_for("pilgrim"), max_uses=5)
    assert invite["max_uses"] == 5
    assert len(invite["code"]) == 8

    mine = (await client.get("/api/invites/mine", headers=headers_for("pilgrim"))).json()
    assert [i["id"] for i in mine] == [invite["id"]]

    everything = (await client.get("/api/invites", headers=admin_headers)).json()
    assert [i["id"] for i in everything] == [invite["id"]]


async def test_suspended_user_status(client, headers_for, admin_headers, save_profile):
    await save_profile("troll", "Troll")
    await client.post("/api/admin/suspend", json={"user_id": "troll", "reason": "spam"}, headers=admin_headers)

    status = (await client.get("/api/access/status", headers=headers_for("troll"))).json()
    assert status == {"status": "suspended", "reason": "spam", "is_admin": False, "profile": None}
