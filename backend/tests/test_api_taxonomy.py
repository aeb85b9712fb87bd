"""Tests for authors, logos and tags, including their effect on blogs."""

import pytest

from app.models import Blog, BlogTag


@pytest.mark.unit
class TestAuthorsAPI:
    """Test author endpoints."""

    def test_create_and_list(self, client, auth_headers):
        response = client.post(
            "/api/authors/",
            json={"name": "  Grace  ", "avatarUrl": "/uploads/icons/g.png"},
            headers=auth_headers,
        )

        assert response.status_code == 201
        assert response.json()["name"] == "Grace"
        assert [a["name"] for a in client.get("/api/authors/").json()] == ["Grace"]

    def test_blank_name_rejected(self, client, auth_headers):
        response = client.post("/api/authors/", json={"name": "   "}, headers=auth_headers)
        assert response.status_code == 422

    def test_update(self, client, auth_headers, test_author):
        response = client.put(
            f"/api/authors/{test_author.id}",
            json={"bio": "Updated bio"},
            headers=auth_headers,
        )

        assert response.status_code == 200
        assert response.json()["bio"] == "Updated bio"
        assert response.json()["name"] == "Ada Writer"

    def test_delete_sets_blog_author_null(
        self, client, auth_headers, db_session, make_blog, test_author
    ):
        blog = make_blog("Credited", author_id=test_author.id)

        response = client.delete(f"/api/authors/{test_author.id}", headers=auth_headers)

        assert response.status_code == 200
        data = client.get(f"/api/blogs/{blog.id}").json()
        assert data["authorId"] is None
        assert data["author"] is None
        assert db_session.query(Blog).count() == 1

    def test_missing_author(self, client, auth_headers):
        assert client.get("/api/authors/999").status_code == 404
        assert client.delete("/api/authors/999", headers=auth_headers).status_code == 404


@pytest.mark.unit
class TestLogosAPI:
    """Test logo endpoints."""

    def test_crud(self, client, auth_headers):
        created = client.post(
            "/api/logos/",
            json={"name": "Partner", "logoUrl": "/uploads/icons/p.png", "date": "2024-03"},
            headers=auth_headers,
        )
        assert created.status_code == 201
        logo_id = created.json()["id"]

        updated = client.put(
            f"/api/logos/{logo_id}", json={"date": "2025-01"}, headers=auth_headers
        )
        assert updated.json()["date"] == "2025-01"
        assert updated.json()["logoUrl"] == "/uploads/icons/p.png"

        assert client.delete(f"/api/logos/{logo_id}", headers=auth_headers).status_code == 200
        assert client.get(f"/api/logos/{logo_id}").status_code == 404

    def test_delete_sets_blog_logo_null(
        self, client, auth_headers, make_blog, test_logo
    ):
        blog = make_blog("Branded", logo_id=test_logo.id)

        client.delete(f"/api/logos/{test_logo.id}", headers=auth_headers)

        data = client.get(f"/api/blogs/{blog.id}").json()
        assert data["logoId"] is None
        assert data["logo"] is None


@pytest.mark.unit
class TestTagsAPI:
    """Test tag endpoints."""

    def test_create_uses_default_color(self, client, auth_headers):
        response = client.post("/api/tags/", json={"name": "Poetry"}, headers=auth_headers)

        assert response.status_code == 201
        assert response.json()["color"] == "#3B82F6"

    def test_duplicate_name_conflicts(self, client, auth_headers, test_tags):
        response = client.post("/api/tags/", json={"name": "Art"}, headers=auth_headers)
        assert response.status_code == 409

    def test_rename_to_existing_conflicts(self, client, auth_headers, test_tags):
        response = client.put(
            f"/api/tags/{test_tags[0].id}", json={"name": "Music"}, headers=auth_headers
        )
        assert response.status_code == 409

    def test_list_sorted_by_name(self, client, test_tags):
        names = [t["name"] for t in client.get("/api/tags/").json()]
        assert names == ["Art", "Code", "Music"]

    def test_delete_detaches_from_blogs(
        self, client, auth_headers, db_session, make_blog, test_tags
    ):
        blog = make_blog("Tagged", tags=[test_tags[0].id, test_tags[1].id])

        response = client.delete(f"/api/tags/{test_tags[0].id}", headers=auth_headers)

        assert response.status_code == 200
        assert db_session.query(BlogTag).count() == 1
        data = client.get(f"/api/blogs/{blog.id}").json()
        assert [t["name"] for t in data["tags"]] == ["Music"]
