from datetime import datetime, timedelta

from conftest import PASSWORD, register

from serenibook.models import ResetToken, User

NEW_PASSWORD = "NewSecret456&"


def request_reset(client, db_session, email="camille@example.com"):
    response = client.post("/auth/forgot-password", json={"email": email})
    assert response.status_code == 200
    db_session.expire_all()
    return (
        db_session.query(ResetToken)
        .join(User)
        .filter(User.email == email)
        .order_by(ResetToken.id.desc())
        .first()
    )


def test_forgot_password_sends_link_for_known_user(client, db_session, sent_emails):
    register(client, "camille@example.com")
    sent_emails.clear()

    token = request_reset(client, db_session)

    assert token is not None
    assert len(token.token) == 64
    assert token.used is False
    assert timedelta(minutes=59) < token.expires_at - datetime.utcnow() <= timedelta(minutes=60)
    assert len(sent_emails) == 1
    assert f"http://localhost:3000/reset-password?token={token.token}" in sent_emails[0]["body"]


def test_forgot_password_does_not_reveal_unknown_accounts(client, db_session, sent_emails):
    register(client, "camille@example.com")
    sent_emails.clear()

    known = client.post("/auth/forgot-password", json={"email": "camille@example.com"})
    unknown = client.post("/auth/forgot-password", json={"email": "nobody@example.com"})

    assert known.status_code == unknown.status_code == 200
    assert known.json() == unknown.json()
    assert len(sent_emails) == 1


def test_forgot_password_rejects_malformed_email(client):
    assert client.post("/auth/forgot-password", json={"email": "nope"}).status_code == 400


def test_verify_token_states(client, db_session):
    register(client, "camille@example.com")
    token = request_reset(client, db_session)

    assert client.get("/auth/verify-token").status_code == 400
    assert client.get("/auth/verify-token?token=unknown").status_code == 400
    assert client.get(f"/auth/verify-token?token={token.token}").json() == {"valid": True}

    token.expires_at = datetime.utcnow() - timedelta(minutes=1)
    db_session.commit()
    response = client.get(f"/auth/verify-token?token={token.token}")
    assert response.status_code == 400
    assert "expired" in response.json()["detail"]


def test_reset_password_updates_hash_and_consumes_token(client, db_session):
    register(client, "camille@example.com")
    token = request_reset(client, db_session)

    response = client.post(
        "/auth/reset-password", json={"token": token.token, "password": NEW_PASSWORD}
    )

    assert response.status_code == 200
    assert response.json()["success"] is True

    db_session.expire_all()
    assert db_session.get(ResetToken, token.id).used is True

    old_login = client.post("/auth/login", json={"email": "camille@example.com", "password": PASSWORD})
    new_login = client.post(
        "/auth/login", json={"email": "camille@example.com", "password": NEW_PASSWORD}
    )
    assert old_login.status_code == 401
    assert new_login.status_code == 200


def test_reset_token_is_single_use(client, db_session):
    register(client, "camille@example.com")
    token = request_reset(client, db_session)
    client.post("/auth/reset-password", json={"token": token.token, "password": NEW_PASSWORD})

    again = client.post("/auth/reset-password", json={"token": token.token, "password": "Other789#"})
    check = client.get(f"/auth/verify-token?token={token.token}")

    assert again.status_code == 400
    assert check.status_code == 400
    assert "already been used" in check.json()["detail"]


def test_reset_password_invalidates_other_outstanding_links(client, db_session):
    register(client, "camille@example.com")
    first = request_reset(client, db_session)
    second = request_reset(client, db_session)
    assert first.id != second.id

    client.post("/auth/reset-password", json={"token": second.token, "password": NEW_PASSWORD})

    assert client.get(f"/auth/verify-token?token={first.token}").status_code == 400


def test_reset_password_enforces_policy(client, db_session):
    register(client, "camille@example.com")
    token = request_reset(client, db_session)

    response = client.post("/auth/reset-password", json={"token": token.token, "password": "weak"})

    assert response.status_code == 400
    db_session.expire_all()
    assert db_session.get(ResetToken, token.id).used is False


def test_forgot_password_is_rate_limited(client):
    for _ in range(5):
        assert client.post("/auth/forgot-password", json={"email": "a@example.com"}).status_code == 200

    assert client.post("/auth/forgot-password", json={"email": "a@example.com"}).status_code == 429
