"""Tests for creation library endpoints."""

from fastapi.testclient import TestClient

from creation_studio.api.app import create_app
from creation_studio.services.creations import CREATIONS, IMAGES


def test_health(container) -> None:
    client = TestClient(create_app(container))

    response = client.get("/health")

    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_save_and_list_creations(container, document_store) -> None:
    client = TestClient(create_app(container))

    response = client.post(
        "/creations",
        json={
            "userId": "user-1",
            "items": [
                {"type": "image", "prompt": "a fox", "imageUrl": "https://cdn/fox.png"},
                {"type": "3d-model", "prompt": "a chair", "modelUrl": "https://cdn/c"},
            ],
        },
    )

    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    assert len(body["created"]) == 2
    assert len(document_store.collections[CREATIONS]) == 2

    listed = client.get("/creations", params={"userId": "user-1", "type": "3d-model"})

    assert listed.status_code == 200
    [item] = listed.json()["items"]
    assert item["prompt"] == "a chair"
    assert item["modelUrl"] == "https://cdn/c"
    assert item["imageUrl"] is None
    assert item["userId"] == "user-1"
    assert item["createdAt"] is not None


def test_save_creations_requires_user(container) -> None:
    client = TestClient(create_app(container))

    response = client.post("/creations", json={"items": [{"type": "image"}]})

    assert response.status_code == 400
    assert response.json() == {"error": "Missing userId"}


def test_save_creations_requires_items(container, document_store) -> None:
    client = TestClient(create_app(container))

    response = client.post("/creations", json={"userId": "user-1", "items": []})

    assert response.status_code == 400
    assert document_store.insert_calls == 0


def test_list_creations_rejects_unknown_type(container) -> None:
    client = TestClient(create_app(container))

    response = client.get("/creations", params={"userId": "user-1", "type": "video"})

    assert response.status_code == 400


def test_list_creations_requires_user(container) -> None:
    client = TestClient(create_app(container))

    response = client.get("/creations")

    assert response.status_code == 400


def test_storage_failure_returns_500(container, document_store) -> None:
    document_store.fail_on_insert = 1
    client = TestClient(create_app(container))

    response = client.post(
        "/creations",
        json={"userId": "user-1", "items": [{"type": "image", "prompt": "x"}]},
    )

    assert response.status_code == 500
    assert response.json() == {"error": "insert rejected"}


def test_delete_creation(container, document_store) -> None:
    client = TestClient(create_app(container))
    created = client.post(
        "/creations",
        json={"userId": "user-1", "items": [{"type": "image", "prompt": "x"}]},
    ).json()["created"][0]["id"]

    response = client.delete(f"/creations/{created}")

    assert response.status_code == 200
    assert response.json() == {"success": True}
    assert document_store.collections[CREATIONS] == []


def test_prompt_endpoints(container) -> None:
    client = TestClient(create_app(container))

    saved = client.post(
        "/prompts",
        json={"userId": "user-1", "text": "misty forest", "metadata": {"tag": "a"}},
    )
    assert saved.status_code == 200
    prompt_id = saved.json()["id"]

    listed = client.get("/prompts", params={"userId": "user-1"}).json()["items"]
    assert [prompt["text"] for prompt in listed] == ["misty forest"]
    assert listed[0]["metadata"] == {"tag": "a"}

    deleted = client.delete(f"/prompts/{prompt_id}")
    assert deleted.status_code == 200
    assert client.get("/prompts", params={"userId": "user-1"}).json()["items"] == []


def test_save_image(container, document_store) -> None:
    client = TestClient(create_app(container))

    response = client.post(
        "/save-image", json={"imageUrl": "https://cdn/cat.png", "prompt": "a cat"}
    )

    assert response.status_code == 200
    assert response.json()["message"] == "Image saved successfully"
    [document] = document_store.collections[IMAGES]
    assert document["user_id"] == "anonymous"


def test_save_image_missing_fields(container) -> None:
    client = TestClient(create_app(container))

    response = client.post("/save-image", json={"prompt": "a cat"})

    assert response.status_code == 400
    assert response.json() == {
        "error": "Missing required fields: imageUrl and prompt"
    }


def test_unknown_route_returns_json_404(container) -> None:
    client = TestClient(create_app(container))

    response = client.get("/nope")

    assert response.status_code == 404
    assert response.json()["error"] == "not_found"


def test_creation_item_without_type_is_a_validation_error(
    container, document_store
) -> None:
    client = TestClient(create_app(container))

    response = client.post(
        "/creations", json={"userId": "user-1", "items": [{"prompt": "p"}]}
    )

    assert response.status_code == 400
    assert response.json() == {"error": "Missing required field: type"}
    assert document_store.insert_calls == 0


def test_prompt_without_text_is_a_validation_error(container) -> None:
    client = TestClient(create_app(container))

    response = client.post("/prompts", json={"userId": "user-1"})

    assert response.status_code == 400
    assert response.json() == {"error": "Missing required field: text"}


def test_malformed_field_is_a_validation_error(container) -> None:
    client = TestClient(create_app(container))

    response = client.post(
        "/prompts", json={"userId": "user-1", "text": "x", "metadata": "tags"}
    )

    assert response.status_code == 400
    assert response.json()["error"].startswith("Invalid value for metadata:")
