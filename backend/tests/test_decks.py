from uuid import UUID, uuid4

from fastapi.testclient import TestClient
from sqlalchemy import select, func

from flashstudy.models import Deck, Flashcard, StudySession, StudySessionCard


class TestCreateDeck:
    """POST /api/decks/"""

    def test_create_deck_success(self, client: TestClient, auth_headers):
        response = client.post(
            "/api/decks/",
            headers=auth_headers,
            json={
                "name": "French",
                "category": "Languages",
                "description": "Everyday words",
                "settings": {"random_order": True},
            },
        )
        assert response.status_code == 201
        data = response.json()
        assert UUID(data["deck_id"])
        assert data["name"] == "French"
        assert data["color"] == "#3B82F6"
        assert data["is_public"] is False
        assert data["settings"]["random_order"] is True
        assert data["statistics"] == {"total_cards": 0, "total_study_time": 0, "average_score": 0.0}

    def test_create_deck_reports_all_errors(self, client: TestClient, auth_headers):
        """Blank name, missing category and a long description come back in one response."""
        response = client.post(
            "/api/decks/",
            headers=auth_headers,
            json={"name": "   ", "description": "x" * 501},
        )
        assert response.status_code == 422
        body = response.json()
        assert body["type"] == "InvalidArgument"
        fields = {err["field"] for err in body["errors"]}
        assert {"name", "category", "description"} <= fields

    def test_create_deck_no_auth(self, client: TestClient):
        response = client.post("/api/decks/", json={"name": "Test", "category": "General"})
        assert response.status_code == 401


class TestReadDecks:
    """GET /api/decks/ and /api/decks/{deck_id}"""

    def test_list_only_own_decks(self, client: TestClient, auth_headers, make_deck, test_user, other_user):
        make_deck(test_user, "Mine")
        make_deck(other_user, "Theirs", is_public=True)

        response = client.get("/api/decks/", headers=auth_headers)
        assert response.status_code == 200
        assert [d["name"] for d in response.json()] == ["Mine"]

    def test_public_deck_visible_to_others(self, client: TestClient, other_headers, make_deck, test_user):
        deck = make_deck(test_user, "Shared", cards=2, is_public=True)

        response = client.get(f"/api/decks/{deck.id}", headers=other_headers)
        assert response.status_code == 200
        assert response.json()["statistics"]["total_cards"] == 2

    def test_private_deck_hidden_from_others(self, client: TestClient, other_headers, make_deck, test_user):
        deck = make_deck(test_user, "Private")

        response = client.get(f"/api/decks/{deck.id}", headers=other_headers)
        assert response.status_code == 404
        assert response.json()["type"] == "NotFound"

    def test_missing_deck(self, client: TestClient, auth_headers):
        response = client.get(f"/api/decks/{uuid4()}", headers=auth_headers)
        assert response.status_code == 404

    def test_malformed_deck_id(self, client: TestClient, auth_headers):
        response = client.get("/api/decks/not-a-uuid", headers=auth_headers)
        assert response.status_code == 422


class TestUpdateDeck:
    """PATCH /api/decks/{deck_id}"""

    def test_enable_random_order(self, client: TestClient, auth_headers, make_deck, test_user):
        deck = make_deck(test_user, "Math")

        response = client.patch(
            f"/api/decks/{deck.id}",
            headers=auth_headers,
            json={"settings": {"random_order": True}, "is_public": True},
        )
        assert response.status_code == 200
        data = response.json()
        assert data["settings"]["random_order"] is True
        assert data["is_public"] is True
        assert data["name"] == "Math"

    def test_only_owner_updates(self, client: TestClient, other_headers, make_deck, test_user):
        deck = make_deck(test_user, "Math", is_public=True)

        response = client.patch(f"/api/decks/{deck.id}", headers=other_headers, json={"name": "Mine now"})
        assert response.status_code == 404


class TestDeleteDeck:
    """DELETE /api/decks/{deck_id}"""

    def test_delete_cascades_to_cards_and_sessions(self, client: TestClient, auth_headers, db, math_deck):
        started = client.post(f"/api/study/decks/{math_deck.id}", headers=auth_headers)
        assert started.status_code == 201

        response = client.delete(f"/api/decks/{math_deck.id}", headers=auth_headers)
        assert response.status_code == 204

        assert db.scalar(select(func.count()).select_from(Flashcard).where(Flashcard.deck_id == math_deck.id)) == 0
        assert db.scalar(select(func.count()).select_from(StudySession).where(StudySession.deck_id == math_deck.id)) == 0
        assert db.scalar(select(func.count()).select_from(StudySessionCard)) == 0
        assert db.get(Deck, math_deck.id, populate_existing=True) is None

        response = client.get(f"/api/decks/{math_deck.id}", headers=auth_headers)
        assert response.status_code == 404

    def test_only_owner_deletes(self, client: TestClient, other_headers, make_deck, test_user):
        deck = make_deck(test_user, "Math", cards=1, is_public=True)

        response = client.delete(f"/api/decks/{deck.id}", headers=other_headers)
        assert response.status_code == 404

    def test_pending_deletion_hides_deck_and_can_be_resumed(self, client: TestClient, auth_headers, db, math_deck):
        """A cascade that stopped half way leaves the deck hidden; deleting again finishes it."""
        math_deck.pending_deletion = True
        db.commit()

        assert client.get(f"/api/decks/{math_deck.id}", headers=auth_headers).status_code == 404
        assert client.post(f"/api/study/decks/{math_deck.id}", headers=auth_headers).status_code == 404
        assert client.post(
            f"/api/decks/{math_deck.id}/cards",
            headers=auth_headers,
            json={"question": "q", "answer": "a"},
        ).status_code == 404

        response = client.delete(f"/api/decks/{math_deck.id}", headers=auth_headers)
        assert response.status_code == 204
        assert db.scalar(select(func.count()).select_from(Flashcard)) == 0
        db.expire_all()
        assert db.get(Deck, math_deck.id) is None
