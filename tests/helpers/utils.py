from fastapi import status
from fastapi.testclient import TestClient

BASE_URL = "/api/posts"


def create_post(test_client: TestClient, **payload) -> dict:
    body = {
        "title": "Hello World",
        "content": "Lorem ipsum odor amet, consectetuer adipiscing elit.",
        "author": "Admin",
    }
    body.update(payload)
    response = test_client.post(BASE_URL, json=body)
    assert response.status_code == status.HTTP_201_CREATED, response.text
    return response.json()


def seed_posts(test_client: TestClient, count: int) -> list[dict]:
    return [create_post(test_client, title=f"Seeded post {i}") for i in range(count)]
