"""Tests for announcement and highlight endpoints."""

from datetime import datetime, timedelta, timezone

import pytest
from sqlalchemy import text

from app.models import Announcement, Highlight


def _announcement(db_session, title, active=True, expires_at=None):
    announcement = Announcement(
        title=title, message="msg", active=active, expires_at=expires_at
    )
    db_session.add(announcement)
    db_session.commit()
    return announcement


@pytest.mark.unit
class TestAnnouncementsAPI:
    """Test announcement endpoints."""

    def test_active_filter_applies_expiry(self, client, db_session):
        now = datetime.now(timezone.utc)
        _announcement(db_session, "Current", expires_at=now + timedelta(days=1))
        _announcement(db_session, "Forever")
        _announcement(db_session, "Expired", expires_at=now - timedelta(minutes=1))
        _announcement(db_session, "Switched off", active=False)

        response = client.get("/api/announcements/active")

        assert response.status_code == 200
        assert sorted(a["title"] for a in response.json()) == ["Current", "Forever"]

    def test_unreadable_expiry_is_hidden(self, client, db_session):
        broken = _announcement(db_session, "Broken")
        _announcement(db_session, "Forever")
        db_session.execute(
            text('UPDATE announcements SET "expiresAt" = :value WHERE id = :id'),
            {"value": "next tuesday", "id": broken.id},
        )
        db_session.commit()

        response = client.get("/api/announcements/active")

        assert [a["title"] for a in response.json()] == ["Forever"]

    def test_expired_announcement_keeps_active_flag(self, client, db_session):
        expired = _announcement(
            db_session,
            "Expired",
            expires_at=datetime.now(timezone.utc) - timedelta(hours=1),
        )

        client.get("/api/announcements/active")
        data = client.get(f"/api/announcements/{expired.id}").json()

        assert data["active"] is True

    def test_list_includes_inactive(self, client, db_session):
        _announcement(db_session, "On")
        _announcement(db_session, "Off", active=False)

        assert len(client.get("/api/announcements/").json()) == 2

    def test_create_update_delete(self, client, auth_headers):
        created = client.post(
            "/api/announcements/",
            json={
                "title": "Workshop",
                "message": "Sign up now",
                "active": True,
                "expiresAt": "2099-01-01T00:00:00.000Z",
            },
            headers=auth_headers,
        )
        assert created.status_code == 201
        announcement_id = created.json()["id"]
        assert created.json()["expiresAt"].startswith("2099-01-01T00:00:00")

        updated = client.put(
            f"/api/announcements/{announcement_id}",
            json={"active": False},
            headers=auth_headers,
        )
        assert updated.json()["active"] is False
        assert updated.json()["title"] == "Workshop"

        deleted = client.delete(
            f"/api/announcements/{announcement_id}", headers=auth_headers
        )
        assert deleted.status_code == 200
        assert client.get(f"/api/announcements/{announcement_id}").status_code == 404

    def test_create_requires_title(self, client, auth_headers):
        response = client.post(
            "/api/announcements/", json={"message": "no title"}, headers=auth_headers
        )
        assert response.status_code == 422

    def test_mutations_require_auth(self, client, db_session):
        announcement = _announcement(db_session, "Guarded")

        assert client.post("/api/announcements/", json={"title": "x"}).status_code == 401
        assert (
            client.put(f"/api/announcements/{announcement.id}", json={}).status_code
            == 401
        )
        assert client.delete(f"/api/announcements/{announcement.id}").status_code == 401


@pytest.mark.unit
class TestHighlightsAPI:
    """Test highlight endpoints."""

    def test_active_highlights(self, client, db_session):
        db_session.add_all(
            [
                Highlight(title="Shown", active=True),
                Highlight(title="Hidden", active=False),
            ]
        )
        db_session.commit()

        data = client.get("/api/highlights/active").json()

        assert [h["title"] for h in data] == ["Shown"]

    def test_create_defaults_to_image(self, client, auth_headers):
        response = client.post(
            "/api/highlights/",
            json={"title": "Reel", "imageUrl": "/uploads/highlights/x.png"},
            headers=auth_headers,
        )

        assert response.status_code == 201
        assert response.json()["type"] == "image"
        assert response.json()["active"] is False

    def test_invalid_type_rejected(self, client, auth_headers):
        response = client.post(
            "/api/highlights/",
            json={"title": "Reel", "type": "gif"},
            headers=auth_headers,
        )
        assert response.status_code == 422

    def test_update_and_delete(self, client, auth_headers):
        created = client.post(
            "/api/highlights/", json={"title": "Clip"}, headers=auth_headers
        ).json()

        updated = client.put(
            f"/api/highlights/{created['id']}",
            json={"type": "video", "active": True},
            headers=auth_headers,
        ).json()
        assert updated["type"] == "video"
        assert updated["active"] is True

        response = client.delete(f"/api/highlights/{created['id']}", headers=auth_headers)
        assert response.status_code == 200
        assert client.get(f"/api/highlights/{created['id']}").status_code == 404
