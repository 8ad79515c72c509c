import pytest
from sqlalchemy.exc import IntegrityError

from whisperer.core.auth import provision_user
from whisperer.core.llm_list import FALLBACK_CLAUDE_MODEL_ID
from whisperer.models.assistant import Assistant
from whisperer.models.workspace import Workspace


def test_list_puts_home_first(auth_client, home_workspace):
    auth_client.post("/api/workspaces", json={"name": "Feature Film"})

    workspaces = auth_client.get("/api/workspaces").json()

    assert [w["is_home"] for w in workspaces] == [True, False]
    assert workspaces[0]["id"] == home_workspace.id


def test_created_workspaces_are_never_home(auth_client, db, user):
    response = auth_client.post("/api/workspaces", json={"name": "Pilot", "default_model": "gpt-4o"})

    assert response.status_code == 200
    assert response.json()["is_home"] is False
    assert response.json()["default_model"] == FALLBACK_CLAUDE_MODEL_ID
    homes = db.query(Workspace).filter(Workspace.user_id == user.id, Workspace.is_home == True).count()  # noqa: E712
    assert homes == 1


def test_home_workspace_cannot_be_deleted(auth_client, home_workspace):
    response = auth_client.delete(f"/api/workspaces/{home_workspace.id}")

    assert response.status_code == 400
    assert response.json() == {"message": "The home workspace cannot be deleted."}


def test_delete_other_workspace_removes_its_chats(auth_client):
    workspace = auth_client.post("/api/workspaces", json={"name": "Shorts"}).json()
    auth_client.post(f"/api/workspaces/{workspace['id']}/chats", json={"name": "Draft notes"})

    response = auth_client.delete(f"/api/workspaces/{workspace['id']}")

    assert response.status_code == 200
    assert auth_client.get(f"/api/workspaces/{workspace['id']}").status_code == 404


def test_empty_update_is_rejected(auth_client, home_workspace):
    response = auth_client.patch(f"/api/workspaces/{home_workspace.id}", json={})

    assert response.status_code == 400


def test_null_for_required_field_is_rejected(auth_client, db, home_workspace):
    response = auth_client.patch(f"/api/workspaces/{home_workspace.id}", json={"name": None})

    assert response.status_code == 400
    assert response.json() == {"message": "name cannot be null."}
    db.refresh(home_workspace)
    assert home_workspace.name == "Home"


def test_second_home_workspace_violates_unique_index(db, user, home_workspace):
    db.add(Workspace(user_id=user.id, name="Another home", is_home=True, default_model=FALLBACK_CLAUDE_MODEL_ID))

    with pytest.raises(IntegrityError):
        db.commit()
    db.rollback()

    db.add(Workspace(user_id=user.id, name="Side project", is_home=False, default_model=FALLBACK_CLAUDE_MODEL_ID))
    db.commit()
    homes = db.query(Workspace).filter(Workspace.user_id == user.id, Workspace.is_home == True).count()  # noqa: E712
    assert homes == 1


def test_quick_settings_route(auth_client, db, user, home_workspace):
    assistant = Assistant(user_id=user.id, name="Punch-up", model="claude-3-opus-20240229", temperature=0.9)
    db.add(assistant)
    db.commit()

    picked = auth_client.post(
        f"/api/workspaces/{home_workspace.id}/quick-settings", json={"assistantId": assistant.id}
    ).json()
    cleared = auth_client.post(f"/api/workspaces/{home_workspace.id}/quick-settings", json={"assistantId": None}).json()

    assert picked["selectedAssistantId"] == assistant.id
    assert picked["chatSettings"]["model"] == "claude-3-opus-20240229"
    assert picked["isModified"] is False
    assert cleared["selectedAssistantId"] is None
    assert cleared["chatSettings"]["prompt"] == home_workspace.default_prompt


def test_start_chat_from_assistant_route(auth_client, db, user, home_workspace):
    assistant = Assistant(user_id=user.id, name="Punch-up", model="claude-3-opus-20240229")
    db.add(assistant)
    db.commit()

    response = auth_client.post(f"/api/workspaces/{home_workspace.id}/assistants/{assistant.id}/chats")

    assert response.status_code == 200
    body = response.json()
    assert body["chat"]["name"] == "Chat with Punch-up"
    assert body["chat"]["user_id"] == user.id
    assert body["redirectUrl"] == f"/{home_workspace.id}/chat/{body['chat']['id']}"
    chats = auth_client.get(f"/api/workspaces/{home_workspace.id}/chats").json()
    assert [c["id"] for c in chats] == [body["chat"]["id"]]


def test_private_assistants_of_other_users_are_hidden(auth_client, db, home_workspace):
    stranger, _ = provision_user(db, email="stranger@example.com")
    private = Assistant(user_id=stranger.id, name="Secret", model="claude-3-opus-20240229")
    db.add(private)
    db.commit()

    response = auth_client.post(f"/api/workspaces/{home_workspace.id}/assistants/{private.id}/chats")

    assert response.status_code == 404
