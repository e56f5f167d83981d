"""
Tests for articles, likes and bookmarks.
"""
from kitadocs.models import Article, ArticleCategory, ArticleLike, ArticleBookmark, VerificationStatus

ARTICLE_FORM = {
    "title": "Managing hypertension",
    "content": "Reduce salt, stay active and take medication as prescribed.",
    "category": "GENERAL_HEALTH",
}


def test_create_article_with_image(client, db, make_doctor, doctor_headers, storage):
    doctor = make_doctor()
    response = client.post(
        "/api/v1/articles",
        data=ARTICLE_FORM,
        files={"image": ("cover.png", b"\x89PNG fake image", "image/png")},
        headers=doctor_headers(doctor)
    )
    assert response.status_code == 201
    data = response.json()
    assert data["title"] == "Managing hypertension"
    assert data["doctor"]["full_name"] == doctor.full_name
    assert data["image_url"].startswith("https://storage.example.com/kitadocs/article-image-")
    assert data["like_count"] == 0

    article = db.get(Article, data["id"])
    assert article.image_public_id in storage.objects


def test_create_article_without_image(client, make_doctor, doctor_headers, storage):
    doctor = make_doctor()
    response = client.post("/api/v1/articles", data=ARTICLE_FORM, headers=doctor_headers(doctor))
    assert response.status_code == 201
    assert response.json()["image_url"] is None
    assert storage.objects == {}


def test_unverified_doctor_cannot_publish(client, db, make_doctor, doctor_headers):
    doctor = make_doctor(status=VerificationStatus.PENDING)
    response = client.post("/api/v1/articles", data=ARTICLE_FORM, headers=doctor_headers(doctor))
    assert response.status_code == 403
    assert response.json()["error"] == "Doctor profile is not verified"
    assert db.query(Article).count() == 0


def test_readers_cannot_publish(client, make_user, user_headers):
    user = make_user()
    response = client.post("/api/v1/articles", data=ARTICLE_FORM, headers=user_headers(user))
    assert response.status_code == 401


def test_create_article_rejects_non_image(client, db, make_doctor, doctor_headers, storage):
    doctor = make_doctor()
    response = client.post(
        "/api/v1/articles",
        data=ARTICLE_FORM,
        files={"image": ("notes.pdf", b"%PDF-1.4", "application/pdf")},
        headers=doctor_headers(doctor)
    )
    assert response.status_code == 400
    assert response.json()["error"] == "Only image files are allowed"
    assert storage.objects == {}
    assert db.query(Article).count() == 0


def test_create_article_rejects_unknown_category(client, make_doctor, doctor_headers):
    doctor = make_doctor()
    response = client.post(
        "/api/v1/articles",
        data={**ARTICLE_FORM, "category": "ASTROLOGY"},
        headers=doctor_headers(doctor)
    )
    assert response.status_code == 400


def test_create_article_rejects_blank_title(client, make_doctor, doctor_headers):
    doctor = make_doctor()
    response = client.post(
        "/api/v1/articles",
        data={**ARTICLE_FORM, "title": "   "},
        headers=doctor_headers(doctor)
    )
    assert response.status_code == 400


def test_latest_articles_limited_to_ten(client, make_doctor, make_article):
    doctor = make_doctor()
    for i in range(12):
        make_article(doctor, title=f"Article {i}")

    response = client.get("/api/v1/articles")
    assert response.status_code == 200
    titles = [a["title"] for a in response.json()]
    assert len(titles) == 10
    assert titles[0] == "Article 11"


def test_all_articles_paginated(client, make_doctor, make_article):
    doctor = make_doctor()
    for i in range(5):
        make_article(doctor, title=f"Article {i}")

    response = client.get("/api/v1/articles/all", params={"page": 2, "size": 2})
    assert response.status_code == 200
    data = response.json()
    assert data["total"] == 5
    assert data["pages"] == 3
    assert data["has_next"] is True
    assert data["has_prev"] is True
    assert [a["title"] for a in data["items"]] == ["Article 2", "Article 1"]


def test_get_article_and_missing(client, make_doctor, make_article):
    article = make_article(make_doctor())
    response = client.get(f"/api/v1/articles/{article.id}")
    assert response.status_code == 200
    assert response.json()["id"] == article.id

    missing = client.get("/api/v1/articles/999")
    assert missing.status_code == 404
    assert missing.json()["error"] == "Article not found"


def test_search_requires_query(client):
    assert client.get("/api/v1/articles/search").status_code == 400
    assert client.get("/api/v1/articles/search", params={"query": "  "}).status_code == 400


def test_search_matches_title_content_and_author(client, make_doctor, make_article):
    amina = make_doctor()
    other = make_doctor(email="other@example.com", full_name="Dr. Kofi Mensah")
    make_article(amina, title="Sleep hygiene", content="Keep a regular schedule.")
    make_article(other, title="Hydration", content="Drink water before you feel thirsty.")

    by_title = client.get("/api/v1/articles/search", params={"query": "SLEEP"}).json()
    assert [a["title"] for a in by_title] == ["Sleep hygiene"]

    by_content = client.get("/api/v1/articles/search", params={"query": "thirsty"}).json()
    assert [a["title"] for a in by_content] == ["Hydration"]

    by_author = client.get("/api/v1/articles/search", params={"query": "mensah"}).json()
    assert [a["title"] for a in by_author] == ["Hydration"]


def test_articles_by_category(client, make_doctor, make_article):
    doctor = make_doctor()
    make_article(doctor, title="Meal planning", category=ArticleCategory.NUTRITION)
    make_article(doctor, title="Running tips", category=ArticleCategory.FITNESS)

    response = client.get("/api/v1/articles/category/NUTRITION")
    assert response.status_code == 200
    assert [a["title"] for a in response.json()] == ["Meal planning"]

    assert client.get("/api/v1/articles/category/UNKNOWN").status_code == 400


def test_like_and_unlike(client, db, make_doctor, make_user, make_article, user_headers):
    article = make_article(make_doctor())
    user = make_user()
    headers = user_headers(user)

    response = client.post(f"/api/v1/articles/{article.id}/like", headers=headers)
    assert response.status_code == 200
    assert response.json()["message"] == "Article liked successfully"
    assert client.get(f"/api/v1/articles/{article.id}/like-status", headers=headers).json() == {"liked": True}
    assert client.get(f"/api/v1/articles/{article.id}").json()["like_count"] == 1

    duplicate = client.post(f"/api/v1/articles/{article.id}/like", headers=headers)
    assert duplicate.status_code == 409
    assert db.query(ArticleLike).count() == 1

    response = client.post(f"/api/v1/articles/{article.id}/unlike", headers=headers)
    assert response.status_code == 200
    assert client.get(f"/api/v1/articles/{article.id}/like-status", headers=headers).json() == {"liked": False}

    again = client.post(f"/api/v1/articles/{article.id}/unlike", headers=headers)
    assert again.status_code == 400
    assert again.json()["error"] == "Article not liked yet"


def test_likes_are_counted_per_user(client, make_doctor, make_user, make_article, user_headers):
    article = make_article(make_doctor())
    first = make_user()
    second = make_user(email="second@example.com")
    client.post(f"/api/v1/articles/{article.id}/like", headers=user_headers(first))
    client.post(f"/api/v1/articles/{article.id}/like", headers=user_headers(second))
    assert client.get(f"/api/v1/articles/{article.id}").json()["like_count"] == 2


def test_interactions_on_missing_article(client, db, make_user, user_headers):
    headers = user_headers(make_user())
    assert client.post("/api/v1/articles/999/like", headers=headers).status_code == 404
    assert client.post("/api/v1/articles/999/bookmark", headers=headers).status_code == 404
    assert client.get("/api/v1/articles/999/like-status", headers=headers).status_code == 404
    assert db.query(ArticleLike).count() == 0


def test_interactions_require_reader(client, make_doctor, make_article, doctor_headers):
    doctor = make_doctor()
    article = make_article(doctor)
    assert client.post(f"/api/v1/articles/{article.id}/like").status_code == 401
    assert client.post(f"/api/v1/articles/{article.id}/like", headers=doctor_headers(doctor)).status_code == 401


def test_bookmark_and_unbookmark(client, db, make_doctor, make_user, make_article, user_headers):
    article = make_article(make_doctor())
    headers = user_headers(make_user())

    response = client.post(f"/api/v1/articles/{article.id}/bookmark", headers=headers)
    assert response.status_code == 200
    assert response.json()["message"] == "Article bookmarked successfully"
    assert client.get(f"/api/v1/articles/{article.id}/bookmark-status", headers=headers).json() == {"bookmarked": True}

    assert client.post(f"/api/v1/articles/{article.id}/bookmark", headers=headers).status_code == 409
    assert db.query(ArticleBookmark).count() == 1

    response = client.post(f"/api/v1/articles/{article.id}/unbookmark", headers=headers)
    assert response.status_code == 200
    assert response.json()["message"] == "Bookmark removed successfully"
    assert client.post(f"/api/v1/articles/{article.id}/unbookmark", headers=headers).status_code == 400


def test_author_updates_article(client, make_doctor, make_article, doctor_headers):
    doctor = make_doctor()
    article = make_article(doctor)
    response = client.put(
        f"/api/v1/articles/{article.id}",
        json={"title": "Updated title", "category": "RESEARCH"},
        headers=doctor_headers(doctor)
    )
    assert response.status_code == 200
    data = response.json()
    assert data["title"] == "Updated title"
    assert data["category"] == "RESEARCH"
    assert data["content"] == "Eat well and exercise."


def test_other_doctor_cannot_edit_or_delete(client, db, make_doctor, make_article, doctor_headers):
    article = make_article(make_doctor())
    other = make_doctor(email="other@example.com")

    edit = client.put(f"/api/v1/articles/{article.id}", json={"title": "Hijacked"}, headers=doctor_headers(other))
    assert edit.status_code == 403
    delete = client.delete(f"/api/v1/articles/{article.id}", headers=doctor_headers(other))
    assert delete.status_code == 403

    db.expire_all()
    assert db.get(Article, article.id).title == "Heart health basics"


def test_admin_deletes_article_with_interactions(client, db, make_doctor, make_admin, make_user, make_article,
                                                 admin_headers, user_headers, storage):
    article = make_article(make_doctor())
    article.image_public_id = "article-image-1"
    db.commit()
    user = make_user()
    client.post(f"/api/v1/articles/{article.id}/like", headers=user_headers(user))
    client.post(f"/api/v1/articles/{article.id}/bookmark", headers=user_headers(user))

    response = client.delete(f"/api/v1/articles/{article.id}", headers=admin_headers(make_admin()))
    assert response.status_code == 200
    assert response.json()["message"] == "Article deleted successfully"

    assert db.query(Article).count() == 0
    assert db.query(ArticleLike).count() == 0
    assert db.query(ArticleBookmark).count() == 0
    assert storage.deleted == ["article-image-1"]


def test_update_rejects_blank_title(client, db, make_doctor, make_article, doctor_headers):
    doctor = make_doctor()
    article = make_article(doctor)
    response = client.put(
        f"/api/v1/articles/{article.id}",
        json={"title": "   ", "category": "RESEARCH"},
        headers=doctor_headers(doctor)
    )
    assert response.status_code == 400
    assert response.json()["error"] == "Title, content and category are required"

    db.expire_all()
    unchanged = db.get(Article, article.id)
    assert unchanged.title == "Heart health basics"
    assert unchanged.category == ArticleCategory.GENERAL_HEALTH


def test_update_rejects_blank_content(client, make_doctor, make_article, doctor_headers):
    doctor = make_doctor()
    article = make_article(doctor)
    response = client.put(f"/api/v1/articles/{article.id}", json={"content": "\n\t "}, headers=doctor_headers(doctor))
    assert response.status_code == 400


def test_page_past_the_end_is_empty(client, make_doctor, make_article):
    doctor = make_doctor()
    for i in range(3):
        make_article(doctor, title=f"Article {i}")

    data = client.get("/api/v1/articles/all", params={"page": 5, "size": 2}).json()
    assert data["items"] == []
    assert data["total"] == 3
    assert data["pages"] == 2
    assert data["has_next"] is False


def test_empty_feed_page(client):
    data = client.get("/api/v1/articles/all").json()
    assert data == {
        "items": [], "total": 0, "page": 1, "size": 10, "pages": 0, "has_next": False, "has_prev": False
    }


def test_page_size_is_capped(client):
    assert client.get("/api/v1/articles/all", params={"size": 51}).status_code == 400
    assert client.get("/api/v1/articles/all", params={"page": 0}).status_code == 400
