def _post(client, account, **overrides):
    payload = {"content": "  Nouveau créneau de Python ce samedi !  ", "skills": ["Python"], "category": "Programmation"}
    payload.update(overrides)
    return client.post("/api/posts", json=payload, headers=account["headers"])


def test_only_providers_post(client, provider, learner):
    forbidden = _post(client, learner)
    assert forbidden.status_code == 403
    assert forbidden.json()["detail"] == "Only providers can create posts"

    response = _post(client, provider)
    assert response.status_code == 201
    post = response.json()
    assert post["content"] == "Nouveau créneau de Python ce samedi !"
    assert post["likeCount"] == 0
    assert post["isLiked"] is False
    assert post["author"]["profile"]["city"] == "Casablanca"


def test_post_validation(client, provider):
    assert _post(client, provider, content="   ").status_code == 422
    assert _post(client, provider, skills=[]).status_code == 422
    assert _post(client, provider, content="x" * 5001).status_code == 422


def test_like_and_unlike(client, provider, learner):
    post = _post(client, provider).json()
    url = f"/api/posts/{post['id']}"

    liked = client.post(f"{url}/like", headers=learner["headers"])
    assert liked.status_code == 200
    assert liked.json()["message"] == "Post liked successfully"

    twice = client.post(f"{url}/like", headers=learner["headers"])
    assert twice.status_code == 409

    as_learner = client.get(url, headers=learner["headers"]).json()
    assert as_learner["likeCount"] == 1
    assert as_learner["isLiked"] is True
    assert client.get(url).json()["isLiked"] is False

    unliked = client.delete(f"{url}/unlike", headers=learner["headers"])
    assert unliked.status_code == 200
    assert client.get(url).json()["likeCount"] == 0

    missing = client.delete(f"{url}/unlike", headers=learner["headers"])
    assert missing.status_code == 404
    assert missing.json()["detail"] == "Like not found"


def test_feed_filters_and_pagination(client, provider, register):
    other = register("other@example.com", name="Other", provider=True)
    _post(client, provider, content="Python", skills=["Python"], category="Programmation")
    _post(client, provider, content="SQL", skills=["SQL"], category="Data")
    _post(client, other, content="Anglais", skills=["Anglais"], category="Langues")

    feed = client.get("/api/posts", params={"limit": 2}).json()
    assert feed["pagination"]["total"] == 3
    assert feed["pagination"]["totalPages"] == 2
    assert [p["content"] for p in feed["items"]] == ["Anglais", "SQL"]

    by_skill = client.get("/api/posts", params={"skill": "SQL"}).json()
    assert [p["content"] for p in by_skill["items"]] == ["SQL"]

    by_category = client.get("/api/posts", params={"category": "Langues"}).json()
    assert [p["content"] for p in by_category["items"]] == ["Anglais"]

    by_author = client.get("/api/posts", params={"authorId": other["user"]["id"]}).json()
    assert by_author["pagination"]["total"] == 1

    user_posts = client.get(f"/api/posts/user/{provider['user']['id']}").json()
    assert len(user_posts) == 2
    assert len(client.get("/api/posts/me", headers=provider["headers"]).json()) == 2


def test_delete_post(client, provider, register):
    post = _post(client, provider).json()
    other = register("other@example.com", provider=True)

    forbidden = client.delete(f"/api/posts/{post['id']}", headers=other["headers"])
    assert forbidden.status_code == 403
    assert forbidden.json()["detail"] == "You can only delete your own posts"

    deleted = client.delete(f"/api/posts/{post['id']}", headers=provider["headers"])
    assert deleted.status_code == 200
    assert deleted.json()["message"] == "Post deleted successfully"
    assert client.get(f"/api/posts/{post['id']}").status_code == 404
