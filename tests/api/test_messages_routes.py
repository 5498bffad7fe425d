from conftest import CONVERSATION_ID, make_message


def test_get_message(client, fake_db) -> None:
    fake_db.queue("messages", make_message(file_url="c/x.png", file_name="x.png", file_type="image/png", file_size=2048))

    response = client.get("/api/v1/messages/m-1")

    assert response.status_code == 200
    body = response.json()
    assert body["file_size_label"] == "2.0 KB"
    assert body["is_image"] is True


def test_get_missing_message_is_404(client, fake_db) -> None:
    fake_db.queue("messages", None)

    response = client.get("/api/v1/messages/nope")

    assert response.status_code == 404
    assert response.json()["detail"] == "Message not found"


def test_update_message_trims_content(client, fake_db) -> None:
    fake_db.queue("messages", [make_message(content="Edited")])

    response = client.put("/api/v1/messages/m-1", json={"content": "  Edited  "})

    assert response.status_code == 200
    assert response.json()["content"] == "Edited"
    assert fake_db.queries_for("messages", "update")[0].payload() == {"content": "Edited"}


def test_update_rejects_empty_content(client, fake_db) -> None:
    response = client.put("/api/v1/messages/m-1", json={"content": "   "})

    assert response.status_code == 400
    assert response.json()["detail"] == "Message cannot be empty"
    assert fake_db.queries == []


def test_update_rejects_long_content(client) -> None:
    response = client.put("/api/v1/messages/m-1", json={"content": "x" * 4001})

    assert response.status_code == 400
    assert response.json()["detail"] == "Message must be less than 4000 characters"


def test_update_of_invisible_message_is_404(client, fake_db) -> None:
    fake_db.queue("messages", [])

    response = client.put("/api/v1/messages/m-1", json={"content": "Hi"})

    assert response.status_code == 404


def test_delete_message_removes_attachment(client, fake_db) -> None:
    path = f"{CONVERSATION_ID}/file.pdf"
    fake_db.queue("messages", make_message(file_url=path, file_name="file.pdf"), [make_message()])

    response = client.delete("/api/v1/messages/m-1")

    assert response.status_code == 204
    fake_db.bucket.remove.assert_called_once_with([path])
    assert len(fake_db.queries_for("messages", "delete")) == 1


def test_delete_survives_storage_failure(client, fake_db) -> None:
    fake_db.queue("messages", make_message(file_url="c/f.pdf"), [make_message()])
    fake_db.bucket.remove.side_effect = RuntimeError("storage down")

    response = client.delete("/api/v1/messages/m-1")

    assert response.status_code == 204
    assert len(fake_db.queries_for("messages", "delete")) == 1


def test_delete_plain_message_skips_storage(client, fake_db) -> None:
    fake_db.queue("messages", make_message(), [make_message()])

    response = client.delete("/api/v1/messages/m-1")

    assert response.status_code == 204
    fake_db.bucket.remove.assert_not_called()
