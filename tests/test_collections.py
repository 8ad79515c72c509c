import pytest

from whisperer.core import file_text

ADMIN_HEADERS = {"x-admin-token": "test-admin-token"}


@pytest.fixture(autouse=True)
def fixed_token_count(monkeypatch):
    monkeypatch.setattr(file_text, "count_string_tokens", lambda text, model: 3)


def upload(client, workspace_id, name):
    response = client.post(
        "/api/files",
        data={"workspace_id": workspace_id},
        files={"file": (name, b"FADE IN:", "text/plain")},
    )
    return response.json()


def test_collection_files_keep_insertion_order(auth_client, home_workspace):
    collection = auth_client.post(
        "/api/collections", json={"name": "Season One", "workspace_id": home_workspace.id}
    ).json()
    second = upload(auth_client, home_workspace.id, "ep2.txt")
    first = upload(auth_client, home_workspace.id, "ep1.txt")

    auth_client.post(f"/api/collections/{collection['id']}/files", json={"file_id": second["id"]})
    listed = auth_client.post(f"/api/collections/{collection['id']}/files", json={"file_id": first["id"]}).json()

    assert [f["name"] for f in listed] == ["ep2.txt", "ep1.txt"]
    in_workspace = auth_client.get("/api/collections", params={"workspace_id": home_workspace.id}).json()
    assert [c["id"] for c in in_workspace] == [collection["id"]]


def test_deleted_collection_leaves_nothing_behind(auth_client, client, home_workspace):
    collection = auth_client.post(
        "/api/collections", json={"name": "Drafts", "workspace_id": home_workspace.id}
    ).json()
    script = upload(auth_client, home_workspace.id, "draft.txt")
    auth_client.post(f"/api/collections/{collection['id']}/files", json={"file_id": script["id"]})
    assistant = auth_client.post("/api/assistants", json={"name": "Reader"}).json()
    auth_client.post(f"/api/assistants/{assistant['id']}/collections/{collection['id']}")
    auth_client.post(
        f"/api/workspaces/{home_workspace.id}/chats",
        json={"name": "Scoped", "collection_id": collection["id"]},
    )

    assert auth_client.delete(f"/api/collections/{collection['id']}").status_code == 200

    report = client.post(
        "/api/admin/verify-deletion", json={"collectionId": collection["id"]}, headers=ADMIN_HEADERS
    ).json()
    assert report["collection"] == {
        "id": collection["id"],
        "collections": 0,
        "collection_files": 0,
        "collection_workspaces": 0,
        "assistant_collections": 0,
        "chats": 0,
    }
    assert auth_client.get(f"/api/files/{script['id']}").status_code == 200


def test_deleted_file_leaves_nothing_behind(auth_client, client, home_workspace):
    script = upload(auth_client, home_workspace.id, "scene.txt")
    assistant = auth_client.post("/api/assistants", json={"name": "Reader"}).json()
    auth_client.post(f"/api/assistants/{assistant['id']}/files/{script['id']}")

    auth_client.delete(f"/api/files/{script['id']}")

    report = client.post(
        "/api/admin/verify-deletion",
        json={"fileId": script["id"], "filePath": script["file_path"]},
        headers=ADMIN_HEADERS,
    ).json()
    assert report["file"].pop("id") == script["id"]
    assert set(report["file"].values()) == {0}
    assert report["storage"]["status"] == "missing"


def test_assistant_links_list_in_link_order(auth_client, home_workspace):
    assistant = auth_client.post("/api/assistants", json={"name": "Reader", "model": "gpt-4o"}).json()
    b = upload(auth_client, home_workspace.id, "b.txt")
    a = upload(auth_client, home_workspace.id, "a.txt")
    auth_client.post(f"/api/assistants/{assistant['id']}/files/{b['id']}")
    auth_client.post(f"/api/assistants/{assistant['id']}/files/{a['id']}")
    auth_client.post(f"/api/assistants/{assistant['id']}/files/{b['id']}")

    listed = auth_client.get(f"/api/assistants/{assistant['id']}/files").json()

    assert assistant["model"] != "gpt-4o"
    assert [f["name"] for f in listed] == ["b.txt", "a.txt"]
