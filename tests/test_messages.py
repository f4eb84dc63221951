def _send(client, sender, receiver, text):
    return client.post(
        "/api/messages", json={"receiverId": receiver["user"]["id"], "text": text}, headers=sender["headers"]
    )


def test_send_message_opens_conversation(client, provider, learner):
    response = _send(client, learner, provider, "  Bonjour, vous êtes disponible samedi ?  ")
    assert response.status_code == 201
    message = response.json()
    assert message["text"] == "Bonjour, vous êtes disponible samedi ?"
    assert message["read"] is False
    assert message["sender"]["name"] == "Salma Client"

    conversation = client.get(f"/api/messages/conversations/{learner['user']['id']}", headers=provider["headers"])
    assert conversation.status_code == 200
    body = conversation.json()
    assert body["id"] == message["conversationId"]
    assert {body["user1Id"], body["user2Id"]} == {learner["user"]["id"], provider["user"]["id"]}
    assert body["lastMessageText"] == "Bonjour, vous êtes disponible samedi ?"

    notifications = client.get("/api/notifications", headers=provider["headers"]).json()
    assert notifications[0]["type"] == "message"
    assert notifications[0]["message"] == "Salma Client: Bonjour, vous êtes disponible samedi ?"


def test_message_rules(client, provider, learner):
    to_self = _send(client, learner, learner, "coucou")
    assert to_self.status_code == 400
    assert to_self.json()["detail"] == "Cannot send message to yourself"

    blank = _send(client, learner, provider, "   ")
    assert blank.status_code == 400
    assert blank.json()["detail"] == "Message text cannot be empty"

    unknown = client.post(
        "/api/messages",
        json={"receiverId": "00000000-0000-0000-0000-000000000000", "text": "Allô"},
        headers=learner["headers"],
    )
    assert unknown.status_code == 404

    self_conversation = client.get(
        f"/api/messages/conversations/{learner['user']['id']}", headers=learner["headers"]
    )
    assert self_conversation.status_code == 400


def test_long_message_preview_is_truncated(client, provider, learner):
    _send(client, learner, provider, "a" * 80)
    notification = client.get("/api/notifications", headers=provider["headers"]).json()[0]
    assert notification["message"] == "Salma Client: " + "a" * 50 + "..."


def test_reading_marks_incoming_messages(client, provider, learner):
    first = _send(client, learner, provider, "Premier").json()
    _send(client, learner, provider, "Deuxième")
    _send(client, provider, learner, "Réponse")

    assert client.get("/api/messages/unread/count", headers=provider["headers"]).json() == {"count": 2}

    inbox = client.get("/api/messages/conversations", headers=provider["headers"]).json()
    assert len(inbox) == 1
    assert inbox[0]["unreadCount"] == 2
    assert inbox[0]["otherUser"]["id"] == learner["user"]["id"]
    assert inbox[0]["lastMessage"]["text"] == "Réponse"

    thread = client.get(f"/api/messages/{first['conversationId']}", headers=provider["headers"]).json()
    assert [m["text"] for m in thread] == ["Premier", "Deuxième", "Réponse"]
    assert thread[0]["read"] is False

    assert client.get("/api/messages/unread/count", headers=provider["headers"]).json() == {"count": 0}
    # The learner's own unread reply is untouched
    assert client.get("/api/messages/unread/count", headers=learner["headers"]).json() == {"count": 1}


def test_conversation_access_is_restricted(client, provider, learner, register):
    message = _send(client, learner, provider, "Privé").json()
    outsider = register("outsider@example.com")
    response = client.get(f"/api/messages/{message['conversationId']}", headers=outsider["headers"])
    assert response.status_code == 404
    assert response.json()["detail"] == "Conversation not found or access denied"


def test_inbox_orders_by_latest_activity(client, provider, learner, register):
    other = register("other@example.com", name="Other")
    _send(client, learner, provider, "Ancien")
    _send(client, learner, other, "Récent")

    inbox = client.get("/api/messages/conversations", headers=learner["headers"]).json()
    assert [c["otherUser"]["name"] for c in inbox] == ["Other", "Yassine Provider"]
