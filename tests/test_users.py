"""
Tests for reader registration, login, profile and password reset.
"""
from datetime import timedelta

from kitadocs.core.security import AccountRole, create_password_reset_token, create_access_token, verify_password
from kitadocs.models import User, ArticleBookmark, NotificationJob, NotificationStatus

REGISTRATION = {
    "first_name": "Rita",
    "last_name": "Reader",
    "email": "rita@example.com",
    "password": "reader-pass-123",
}


def test_register_user(client, db):
    response = client.post("/api/v1/users/register", json=REGISTRATION)
    assert response.status_code == 201
    data = response.json()
    assert data["message"] == "User registered successfully"

    user = db.get(User, data["id"])
    assert user.email == "rita@example.com"
    assert user.password_hash != REGISTRATION["password"]


def test_register_duplicate_email_conflicts(client, db):
    assert client.post("/api/v1/users/register", json=REGISTRATION).status_code == 201

    response = client.post("/api/v1/users/register", json=REGISTRATION)
    assert response.status_code == 409
    assert response.json() == {"error": "User already exists", "code": "ALREADY_EXISTS"}
    assert db.query(User).filter(User.email == "rita@example.com").count() == 1


def test_register_duplicate_email_is_case_insensitive(client, db):
    client.post("/api/v1/users/register", json=REGISTRATION)
    response = client.post("/api/v1/users/register", json={**REGISTRATION, "email": "RITA@example.com"})
    assert response.status_code == 409
    assert db.query(User).count() == 1


def test_register_requires_fields(client):
    response = client.post("/api/v1/users/register", json={"email": "x@example.com"})
    assert response.status_code == 400


def test_login_returns_user_and_token(client, make_user):
    user = make_user()
    response = client.post("/api/v1/users/login", json={"email": user.email, "password": "reader-pass-123"})
    assert response.status_code == 200
    data = response.json()
    assert data["user"]["id"] == user.id
    assert "password_hash" not in data["user"]
    assert data["token"]


def test_login_unknown_email(client):
    response = client.post("/api/v1/users/login", json={"email": "ghost@example.com", "password": "whatever1"})
    assert response.status_code == 404
    assert response.json()["error"] == "User not found"


def test_login_wrong_password(client, make_user):
    user = make_user()
    response = client.post("/api/v1/users/login", json={"email": user.email, "password": "wrong-password"})
    assert response.status_code == 401
    assert response.json()["error"] == "Invalid credentials"


def test_profile_requires_token(client):
    response = client.get("/api/v1/users/profile")
    assert response.status_code == 401
    assert response.json()["error"] == "Unauthorized: No token provided"


def test_profile_rejects_bad_token(client):
    response = client.get("/api/v1/users/profile", headers={"Authorization": "Bearer not-a-jwt"})
    assert response.status_code == 401
    assert response.json()["error"] == "Unauthorized: Invalid token"


def test_profile_rejects_other_role_token(client, make_user, make_doctor):
    make_user()
    doctor = make_doctor()
    token = create_access_token(doctor.id, AccountRole.DOCTOR)
    response = client.get("/api/v1/users/profile", headers={"Authorization": f"Bearer {token}"})
    assert response.status_code == 401


def test_profile_for_deleted_user(client):
    token = create_access_token(999, AccountRole.USER)
    response = client.get("/api/v1/users/profile", headers={"Authorization": f"Bearer {token}"})
    assert response.status_code == 401
    assert response.json()["error"] == "Unauthorized: User not found"


def test_profile_includes_bookmarks(client, db, make_user, make_doctor, make_article, user_headers):
    user = make_user()
    doctor = make_doctor()
    saved = make_article(doctor, title="Saved article")
    make_article(doctor, title="Other article")
    db.add(ArticleBookmark(article_id=saved.id, user_id=user.id))
    db.commit()

    response = client.get("/api/v1/users/profile", headers=user_headers(user))
    assert response.status_code == 200
    data = response.json()
    assert data["email"] == user.email
    assert [a["title"] for a in data["bookmarked_articles"]] == ["Saved article"]
    assert data["bookmarked_articles"][0]["bookmark_count"] == 1


def test_forgot_password_queues_email(client, db, make_user, mailer):
    user = make_user()
    response = client.post("/api/v1/users/forgot-password", json={"email": user.email})
    assert response.status_code == 200
    data = response.json()
    assert data["message"] == "Password reset link sent to your email"
    assert "15 minutes" in data["note"]

    assert len(mailer.sent) == 1
    sent = mailer.sent[0]
    assert sent["recipient"] == user.email
    assert sent["template_name"] == "password_reset"
    assert "/user/reset-password?token=" in sent["context"]["reset_link"]

    db.expire_all()
    job = db.query(NotificationJob).one()
    assert job.status == NotificationStatus.SENT


def test_forgot_password_unknown_email(client, mailer):
    response = client.post("/api/v1/users/forgot-password", json={"email": "ghost@example.com"})
    assert response.status_code == 404
    assert mailer.sent == []


def test_reset_password(client, db, make_user):
    user = make_user()
    token = create_password_reset_token(user.email, AccountRole.USER)

    response = client.post(
        "/api/v1/users/reset-password",
        json={"new_password": "brand-new-pass"},
        headers={"Authorization": f"Bearer {token}"}
    )
    assert response.status_code == 200

    db.expire_all()
    assert verify_password("brand-new-pass", db.get(User, user.id).password_hash)
    login = client.post("/api/v1/users/login", json={"email": user.email, "password": "brand-new-pass"})
    assert login.status_code == 200


def test_reset_password_with_expired_token(client, make_user):
    user = make_user()
    token = create_password_reset_token(user.email, AccountRole.USER, expires_delta=timedelta(minutes=-5))

    response = client.post(
        "/api/v1/users/reset-password",
        json={"new_password": "brand-new-pass"},
        headers={"Authorization": f"Bearer {token}"}
    )
    assert response.status_code == 401


def test_reset_password_rejects_session_token(client, make_user, user_headers):
    user = make_user()
    response = client.post(
        "/api/v1/users/reset-password",
        json={"new_password": "brand-new-pass"},
        headers=user_headers(user)
    )
    assert response.status_code == 401


def test_reset_password_email_mismatch(client, make_user):
    user = make_user()
    token = create_password_reset_token(user.email, AccountRole.USER)
    response = client.post(
        "/api/v1/users/reset-password",
        json={"email": "someone-else@example.com", "new_password": "brand-new-pass"},
        headers={"Authorization": f"Bearer {token}"}
    )
    assert response.status_code == 403
