from whisperer.core.auth import provision_user
from whisperer.core.llm_list import FALLBACK_CLAUDE_MODEL_ID
from whisperer.models.assistant import Assistant
from whisperer.models.prompt import Prompt
from whisperer.models.tool import Tool


def test_assistant_model_is_resolved_on_write(auth_client):
    created = auth_client.post("/api/assistants", json={"name": "Reader", "model": "claude-3-opus-20240229"}).json()

    updated = auth_client.patch(f"/api/assistants/{created['id']}", json={"model": "mistral-large-latest"}).json()

    assert created["model"] == "claude-3-opus-20240229"
    assert updated["model"] == FALLBACK_CLAUDE_MODEL_ID


def test_public_and_system_assistants_are_listed_but_read_only(auth_client, db):
    stranger, _ = provision_user(db, email="admin@example.com")
    db.add(Assistant(user_id=stranger.id, name="Shared", model=FALLBACK_CLAUDE_MODEL_ID, sharing="public"))
    db.add(Assistant(user_id=stranger.id, name="Builtin", model=FALLBACK_CLAUDE_MODEL_ID, is_system=True))
    db.add(Assistant(user_id=stranger.id, name="Hidden", model=FALLBACK_CLAUDE_MODEL_ID))
    db.commit()

    listed = auth_client.get("/api/assistants").json()
    names = [a["name"] for a in listed]
    shared = next(a for a in listed if a["name"] == "Shared")

    assert names[0] == "Builtin"
    assert sorted(names) == ["Builtin", "Shared"]
    assert auth_client.patch(f"/api/assistants/{shared['id']}", json={"name": "Mine"}).status_code == 404


def test_modified_route(auth_client):
    assistant = auth_client.post(
        "/api/assistants", json={"name": "Reader", "model": "claude-3-opus-20240229", "temperature": 0.3}
    ).json()
    settings = {
        "model": "claude-3-opus-20240229",
        "prompt": "",
        "temperature": 0.3,
        "contextLength": 4096,
        "includeProfileContext": True,
        "includeWorkspaceInstructions": True,
        "embeddingsProvider": "openai",
    }

    same = auth_client.post(f"/api/assistants/{assistant['id']}/modified", json={"chatSettings": settings}).json()
    settings["contextLength"] = 2048
    changed = auth_client.post(f"/api/assistants/{assistant['id']}/modified", json={"chatSettings": settings}).json()

    assert same == {"isModified": False}
    assert changed == {"isModified": True}


def test_public_prompts_are_visible(auth_client, db):
    stranger, _ = provision_user(db, email="admin@example.com")
    db.add(Prompt(user_id=stranger.id, name="Logline formula", content="When X...", sharing="public"))
    db.add(Prompt(user_id=stranger.id, name="Private notes", content="..."))
    db.commit()
    auth_client.post("/api/prompts", json={"name": "My beat sheet", "content": "Opening image"})

    names = sorted(p["name"] for p in auth_client.get("/api/prompts").json())

    assert names == ["Logline formula", "My beat sheet"]


def test_tool_update_writes_schema(auth_client, db):
    tool = auth_client.post("/api/tools", json={"name": "Formatter", "url": "https://fmt.example.com"}).json()

    response = auth_client.patch(f"/api/tools/{tool['id']}", json={"openapi_schema": '{"openapi": "3.0.0"}'})

    assert response.status_code == 200
    db.expire_all()
    assert db.query(Tool).filter(Tool.id == tool["id"]).one().schema == '{"openapi": "3.0.0"}'


def test_deleting_tool_unlinks_it(auth_client):
    assistant = auth_client.post("/api/assistants", json={"name": "Reader"}).json()
    tool = auth_client.post("/api/tools", json={"name": "Formatter"}).json()
    auth_client.post(f"/api/assistants/{assistant['id']}/tools/{tool['id']}")

    auth_client.delete(f"/api/tools/{tool['id']}")

    assert auth_client.get(f"/api/assistants/{assistant['id']}/tools").json() == []


def start_chat(auth_client, workspace_id, assistant_id):
    return auth_client.post(f"/api/workspaces/{workspace_id}/assistants/{assistant_id}/chats").json()["chat"]


def test_editing_assistant_leaves_started_chats_alone(auth_client, home_workspace):
    assistant = auth_client.post(
        "/api/assistants",
        json={"name": "Reader", "model": "claude-3-opus-20240229", "prompt": "Give notes.", "temperature": 0.3},
    ).json()
    chat = start_chat(auth_client, home_workspace.id, assistant["id"])

    auth_client.patch(
        f"/api/assistants/{assistant['id']}",
        json={"model": "claude-3-haiku-20240307", "prompt": "Rewrite it.", "temperature": 0.9},
    )

    stored = auth_client.get(f"/api/chats/{chat['id']}").json()
    assert stored["model"] == "claude-3-opus-20240229"
    assert stored["prompt"] == "Give notes."
    assert stored["temperature"] == 0.3


def test_deleting_assistant_keeps_its_chats(auth_client, home_workspace):
    assistant = auth_client.post("/api/assistants", json={"name": "Reader", "prompt": "Give notes."}).json()
    chat = start_chat(auth_client, home_workspace.id, assistant["id"])

    response = auth_client.delete(f"/api/assistants/{assistant['id']}")

    assert response.status_code == 200
    stored = auth_client.get(f"/api/chats/{chat['id']}").json()
    assert stored["assistant_id"] is None
    assert stored["prompt"] == "Give notes."
    assert auth_client.get(f"/api/assistants/{assistant['id']}").status_code == 404


def test_null_for_required_chat_field_is_rejected(auth_client, home_workspace):
    chat = auth_client.post(f"/api/workspaces/{home_workspace.id}/chats", json={"name": "Draft notes"}).json()

    response = auth_client.patch(f"/api/chats/{chat['id']}", json={"name": None})

    assert response.status_code == 400
    assert response.json() == {"message": "name cannot be null."}
    assert auth_client.get(f"/api/chats/{chat['id']}").json()["name"] == "Draft notes"


def test_null_clears_nullable_chat_field(auth_client, home_workspace):
    collection = auth_client.post("/api/collections", json={"name": "Drafts"}).json()
    chat = auth_client.post(
        f"/api/workspaces/{home_workspace.id}/chats", json={"name": "Scoped", "collection_id": collection["id"]}
    ).json()

    response = auth_client.patch(f"/api/chats/{chat['id']}", json={"collection_id": None})

    assert response.status_code == 200
    assert response.json()["collection_id"] is None


def test_null_for_required_assistant_field_is_rejected(auth_client):
    assistant = auth_client.post("/api/assistants", json={"name": "Reader"}).json()

    response = auth_client.patch(f"/api/assistants/{assistant['id']}", json={"temperature": None})

    assert response.status_code == 400
    assert response.json() == {"message": "temperature cannot be null."}
