from studybeats.models.feedback import Feedback


def test_submit_feedback(client, test_user, auth_headers, db_session):
    response = client.post(
        "/api/feedback",
        json={"playlistId": "fallback-deep-focus", "rating": 5, "context": "exam week"},
        headers=auth_headers
    )

    assert response.status_code == 201
    body = response.json()
    assert body["playlistId"] == "fallback-deep-focus"
    assert body["rating"] == 5
    assert body["userId"] == test_user.id
    assert db_session.query(Feedback).count() == 1


def test_feedback_requires_login(client):
    response = client.post("/api/feedback", json={"playlistId": "p1", "rating": 3})
    assert response.status_code == 401


def test_feedback_rating_out_of_range(client, auth_headers, db_session):
    response = client.post("/api/feedback", json={"playlistId": "p1", "rating": 6}, headers=auth_headers)

    assert response.status_code == 400
    assert db_session.query(Feedback).count() == 0


def test_my_feedback_newest_first_and_capped(client, auth_headers):
    for i in range(12):
        client.post("/api/feedback", json={"playlistId": f"p{i}", "rating": 1 + i % 5}, headers=auth_headers)

    response = client.get("/api/feedback/my-feedback", headers=auth_headers)

    assert response.status_code == 200
    ids = [row["playlistId"] for row in response.json()]
    assert len(ids) == 10
    assert ids[0] == "p11"
    assert ids[-1] == "p2"


def test_my_feedback_only_returns_own_rows(client, auth_headers, spotify_auth_headers):
    client.post("/api/feedback", json={"playlistId": "mine", "rating": 4}, headers=auth_headers)
    client.post("/api/feedback", json={"playlistId": "theirs", "rating": 2}, headers=spotify_auth_headers)

    response = client.get("/api/feedback/my-feedback", headers=auth_headers)

    assert [row["playlistId"] for row in response.json()] == ["mine"]
