from fastapi import status

from cinematch.api import main
from cinematch.flow.interaction import REQUEST_FAILURE_MESSAGE, VALIDATION_MESSAGE


def new_session(api_client):
    response = api_client.post("/sessions")
    assert response.status_code == status.HTTP_201_CREATED
    return response.json()["sessionId"]


def test_health(api_client):
    response = api_client.get("/health")
    assert response.status_code == status.HTTP_200_OK
    assert response.json() == {"status": "ok"}


def test_create_session_starts_in_input(api_client):
    response = api_client.post("/sessions")
    data = response.json()
    assert data["view"]["step"] == "input"
    assert data["view"]["preferences"]["favoriteMovies"] == []
    assert data["sessionId"] in main.sessions


def test_unknown_session(api_client):
    assert api_client.get("/sessions/nope").status_code == status.HTTP_404_NOT_FOUND


def test_add_and_remove_entries(api_client):
    sid = new_session(api_client)

    api_client.post(f"/sessions/{sid}/preferences/genres", json={"value": "Sci-Fi"})
    api_client.post(f"/sessions/{sid}/preferences/genres", json={"value": "Sci-Fi"})
    api_client.post(f"/sessions/{sid}/preferences/genres", json={"value": "Drama"})
    response = api_client.post(f"/sessions/{sid}/preferences/genres/remove", json={"value": "Sci-Fi"})

    assert response.status_code == status.HTTP_200_OK
    assert response.json()["preferences"]["genres"] == ["Drama"]


def test_unknown_preference_list(api_client):
    sid = new_session(api_client)
    response = api_client.post(f"/sessions/{sid}/preferences/directors", json={"value": "Nolan"})
    assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY


def test_update_scalars(api_client):
    sid = new_session(api_client)
    api_client.patch(f"/sessions/{sid}/preferences", json={"mood": "Dark", "yearRange": "90s"})
    response = api_client.patch(f"/sessions/{sid}/preferences", json={"language": "French"})

    prefs = response.json()["preferences"]
    assert prefs["mood"] == "Dark"
    assert prefs["yearRange"] == "90s"
    assert prefs["language"] == "French"


def test_submit_validation_failure(api_client, oracle):
    sid = new_session(api_client)
    response = api_client.post(f"/sessions/{sid}/submit")

    assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY
    body = response.json()
    assert body["detail"] == VALIDATION_MESSAGE
    assert body["view"]["step"] == "input"
    assert body["view"]["error"] == VALIDATION_MESSAGE
    assert oracle.calls == []


def test_submit_to_results_and_restart(api_client):
    sid = new_session(api_client)
    api_client.post(f"/sessions/{sid}/preferences/genres", json={"value": "Sci-Fi"})
    api_client.post(f"/sessions/{sid}/preferences/favoriteMovies", json={"value": "Inception"})

    response = api_client.post(f"/sessions/{sid}/submit")

    assert response.status_code == status.HTTP_200_OK
    view = response.json()
    assert view["step"] == "results"
    assert view["results"]["countLabel"] == "5 curated picks"
    assert len(view["results"]["cards"]) == 5
    assert view["results"]["cards"][0]["coverUrl"].endswith("/seed/Interstellar/400/600")

    edit = api_client.post(f"/sessions/{sid}/preferences/genres", json={"value": "Drama"})
    assert edit.status_code == status.HTTP_409_CONFLICT

    restarted = api_client.post(f"/sessions/{sid}/restart").json()
    assert restarted["step"] == "input"
    assert restarted["preferences"]["genres"] == []
    assert restarted["results"] is None


def test_submit_request_failure_keeps_preferences(api_client, oracle):
    oracle.reply = "{broken"
    sid = new_session(api_client)
    api_client.patch(f"/sessions/{sid}/preferences", json={"mood": "Cozy"})

    response = api_client.post(f"/sessions/{sid}/submit")

    assert response.status_code == status.HTTP_502_BAD_GATEWAY
    view = response.json()["view"]
    assert view["step"] == "input"
    assert view["error"] == REQUEST_FAILURE_MESSAGE
    assert view["preferences"]["mood"] == "Cozy"


def test_delete_session(api_client):
    sid = new_session(api_client)
    assert api_client.delete(f"/sessions/{sid}").status_code == status.HTTP_204_NO_CONTENT
    assert api_client.get(f"/sessions/{sid}").status_code == status.HTTP_404_NOT_FOUND


def test_stateless_recommend(api_client):
    response = api_client.post("/recommend", json={"genres": ["Sci-Fi"], "favoriteMovies": ["Inception"]})

    assert response.status_code == status.HTTP_200_OK
    data = response.json()
    assert len(data["recommendations"]) == 5
    assert data["summary"]["favoriteMovies"] == "Inception"
    assert "whyRecommended" in data["recommendations"][0]


def test_stateless_recommend_guard(api_client):
    response = api_client.post("/recommend", json={"actors": ["Tom Hanks"]})
    assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY


def test_stateless_recommend_oracle_failure(api_client, oracle):
    oracle.error = RuntimeError("quota exceeded")
    response = api_client.post("/recommend", json={"mood": "Happy"})
    assert response.status_code == status.HTTP_502_BAD_GATEWAY


def test_client_not_loaded(monkeypatch, api_client):
    monkeypatch.setattr(main, "recommendation_client", None)
    assert api_client.post("/sessions").status_code == status.HTTP_503_SERVICE_UNAVAILABLE


def test_stateless_recommend_dedupes_preferences(api_client, oracle):
    response = api_client.post("/recommend", json={"genres": ["Drama", "Drama", ""], "mood": "Calm"})

    assert response.status_code == status.HTTP_200_OK
    prompt, _ = oracle.calls[0]
    assert "- Genres: Drama\n" in prompt


def test_oldest_session_is_evicted(api_client, monkeypatch):
    monkeypatch.setattr(main, "max_sessions", 2)
    first = new_session(api_client)
    second = new_session(api_client)

    # Touching the first session makes the second the least recently used
    assert api_client.get(f"/sessions/{first}").status_code == status.HTTP_200_OK
    third = new_session(api_client)

    assert list(main.sessions) == [first, third]
    assert api_client.get(f"/sessions/{second}").status_code == status.HTTP_404_NOT_FOUND
    assert api_client.get(f"/sessions/{first}").status_code == status.HTTP_200_OK
