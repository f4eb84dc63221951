from conftest import future


def test_only_providers_create_sessions(client, learner, make_session, provider):
    payload = {
        "title": "Anglais conversationnel",
        "description": "Pratique orale",
        "date": future(),
        "duration": 45,
        "isOnline": True,
        "price": 100,
        "maxParticipants": 1,
    }
    forbidden = client.post("/api/sessions", json=payload, headers=learner["headers"])
    assert forbidden.status_code == 403
    assert forbidden.json()["detail"] == "Only providers can create sessions"

    session = make_session(provider)
    assert session["providerId"] == provider["user"]["id"]
    assert session["status"] == "scheduled"
    assert session["bookingCount"] == 0
    assert session["provider"]["profile"]["city"] == "Casablanca"


def test_presential_session_needs_location(client, provider):
    payload = {
        "title": "Cours de maths",
        "description": "En présentiel",
        "date": future(),
        "duration": 60,
        "isOnline": False,
        "price": 150,
        "maxParticipants": 3,
    }
    response = client.post("/api/sessions", json=payload, headers=provider["headers"])
    assert response.status_code == 400
    assert response.json()["detail"] == "Location is required for presential sessions"

    payload["location"] = "Maarif, Casablanca"
    assert client.post("/api/sessions", json=payload, headers=provider["headers"]).status_code == 201


def test_session_field_limits(client, provider):
    payload = {
        "title": "Trop court",
        "description": "10 minutes",
        "date": future(),
        "duration": 10,
        "isOnline": True,
        "price": 50,
        "maxParticipants": 1,
    }
    assert client.post("/api/sessions", json=payload, headers=provider["headers"]).status_code == 422


def test_search_sessions(client, provider, make_session):
    make_session(provider, title="Python", skills=["Python"], price=100, date=future(3))
    make_session(provider, title="React", skills=["React"], price=300, date=future(1))
    make_session(
        provider, title="Maths", skills=["Mathématiques"], isOnline=False, location="Agdal, Rabat", price=200
    )

    everything = client.get("/api/sessions").json()
    assert [s["title"] for s in everything][:2] == ["React", "Python"]

    by_skill = client.get("/api/sessions", params={"skills": "Python,Mathématiques"}).json()
    assert {s["title"] for s in by_skill} == {"Python", "Maths"}

    by_city = client.get("/api/sessions", params={"city": "rabat"}).json()
    assert [s["title"] for s in by_city] == ["Maths"]

    by_price = client.get("/api/sessions", params={"minPrice": 150, "maxPrice": 250}).json()
    assert [s["title"] for s in by_price] == ["Maths"]

    online = client.get("/api/sessions", params={"isOnline": "true"}).json()
    assert {s["title"] for s in online} == {"Python", "React"}


def test_update_and_delete_own_session(client, provider, register, make_session):
    session = make_session(provider)
    other = register("other@example.com", provider=True)

    forbidden = client.put(f"/api/sessions/{session['id']}", json={"price": 1}, headers=other["headers"])
    assert forbidden.status_code == 403

    updated = client.put(f"/api/sessions/{session['id']}", json={"price": 180}, headers=provider["headers"])
    assert updated.status_code == 200
    assert updated.json()["price"] == 180
    assert updated.json()["title"] == session["title"]

    went_offline = client.put(
        f"/api/sessions/{session['id']}", json={"isOnline": False}, headers=provider["headers"]
    )
    assert went_offline.status_code == 400

    deleted = client.delete(f"/api/sessions/{session['id']}", headers=provider["headers"])
    assert deleted.status_code == 200
    assert client.get(f"/api/sessions/{session['id']}").status_code == 404


def test_cannot_delete_booked_session(client, provider, learner, make_session):
    session = make_session(provider)
    client.post("/api/bookings", json={"sessionId": session["id"]}, headers=learner["headers"])

    response = client.delete(f"/api/sessions/{session['id']}", headers=provider["headers"])
    assert response.status_code == 400
    assert response.json()["detail"] == "Cannot delete session with existing bookings"


def test_my_sessions(client, provider, make_session):
    make_session(provider)
    make_session(provider, title="Deuxième")
    response = client.get("/api/sessions/my-sessions", headers=provider["headers"])
    assert response.status_code == 200
    assert len(response.json()) == 2
