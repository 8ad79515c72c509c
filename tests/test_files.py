import os

import pytest

from whisperer.core import file_text, storage
from whisperer.core.auth import get_home_workspace, provision_user
from whisperer.models.file import FileItem
from whisperer.models.links import FileWorkspace


@pytest.fixture(autouse=True)
def fixed_token_count(monkeypatch):
    monkeypatch.setattr(file_text, "count_string_tokens", lambda text, model: 7)


def upload(client, workspace_id, name="scene.txt", data=b"INT. HOUSE - DAY", content_type="text/plain"):
    return client.post(
        "/api/files",
        data={"workspace_id": workspace_id, "description": "Opening scene"},
        files={"file": (name, data, content_type)},
    )


def test_detect_file_type():
    assert file_text.detect_file_type("pilot.pdf") == "pdf"
    assert file_text.detect_file_type("notes.md") == "markdown"
    assert file_text.detect_file_type("pilot.fountain") == "text"
    assert file_text.detect_file_type("poster.png") == "image"
    assert file_text.detect_file_type("blob.bin", "application/octet-stream") == "application/octet-stream"


def test_broken_pdf_yields_marker_text():
    assert file_text.extract_text("broken.pdf", b"not a pdf") == "[Error parsing PDF]"


def test_upload_text_file(auth_client, db, user, home_workspace):
    response = upload(auth_client, home_workspace.id)

    assert response.status_code == 200
    body = response.json()
    assert body["name"] == "scene.txt"
    assert body["type"] == "text"
    assert body["tokens"] == 7
    assert body["size"] == len(b"INT. HOUSE - DAY")
    assert body["file_path"] == f"{user.id}/{body['id']}_scene.txt"
    assert storage.read_object(body["file_path"]) == b"INT. HOUSE - DAY"

    item = db.query(FileItem).filter(FileItem.file_id == body["id"]).one()
    assert item.content == "INT. HOUSE - DAY"
    assert db.query(FileWorkspace).filter(FileWorkspace.file_id == body["id"]).count() == 1

    listed = auth_client.get("/api/files", params={"workspace_id": home_workspace.id}).json()
    assert [f["id"] for f in listed] == [body["id"]]


def test_upload_rejects_empty_file(auth_client, home_workspace):
    response = upload(auth_client, home_workspace.id, data=b"")

    assert response.status_code == 400


def test_upload_into_someone_elses_workspace(auth_client, db):
    stranger, _ = provision_user(db, email="stranger@example.com")
    stranger_home = get_home_workspace(db, stranger.id)

    response = upload(auth_client, stranger_home.id)

    assert response.status_code == 404
    assert db.query(FileWorkspace).count() == 0


def test_delete_file_removes_rows_and_object(auth_client, db, home_workspace):
    body = upload(auth_client, home_workspace.id).json()
    full_path = os.path.join(storage.bucket_root(), body["file_path"])
    assert os.path.exists(full_path)

    response = auth_client.delete(f"/api/files/{body['id']}")

    assert response.status_code == 200
    assert not os.path.exists(full_path)
    assert db.query(FileItem).filter(FileItem.file_id == body["id"]).count() == 0
    assert auth_client.get(f"/api/files/{body['id']}").status_code == 404


def test_update_file_metadata(auth_client, home_workspace):
    body = upload(auth_client, home_workspace.id).json()

    response = auth_client.patch(
        f"/api/files/{body['id']}", json={"logline": "A writer hears voices.", "genre": "Thriller"}
    )

    assert response.status_code == 200
    assert response.json()["genre"] == "Thriller"
    assert response.json()["file_path"] == body["file_path"]
