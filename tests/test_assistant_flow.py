import pytest

from whisperer.core import assistant_flow
from whisperer.core.assistant_flow import ChatSessionState
from whisperer.core.llm_list import resolve_claude_model_id
from whisperer.models.assistant import Assistant
from whisperer.models.collection import Collection
from whisperer.models.file import File
from whisperer.models.links import AssistantCollection, AssistantFile, AssistantTool, CollectionFile
from whisperer.models.tool import Tool
from whisperer.schemas.chat import ChatFileItem, ChatSettings


def make_assistant(db, user, **overrides):
    values = dict(
        user_id=user.id,
        name="Script Doctor",
        prompt="You punch up dialogue.",
        model="claude-3-haiku-20240307",
        temperature=0.8,
        context_length=8000,
        include_profile_context=False,
        include_workspace_instructions=True,
    )
    values.update(overrides)
    assistant = Assistant(**values)
    db.add(assistant)
    db.commit()
    return assistant


def make_file(db, user, name):
    file_record = File(user_id=user.id, name=name, file_path=f"{user.id}/{name}", type="text")
    db.add(file_record)
    db.commit()
    return file_record


def make_tool(db, user, name):
    tool = Tool(user_id=user.id, name=name, url=f"https://tools.example.com/{name}")
    db.add(tool)
    db.commit()
    return tool


def link(db, row):
    db.add(row)
    db.commit()


@pytest.fixture
def assistant(db, user):
    return make_assistant(db, user)


@pytest.fixture
def state(profile, home_workspace):
    return ChatSessionState(profile=profile, selected_workspace=home_workspace)


def test_collected_files_keep_link_order_with_duplicates(db, user, assistant):
    a, b, c = make_file(db, user, "a.txt"), make_file(db, user, "b.txt"), make_file(db, user, "c.txt")
    collection = Collection(user_id=user.id, name="Drafts")
    db.add(collection)
    db.commit()

    link(db, AssistantFile(user_id=user.id, assistant_id=assistant.id, file_id=a.id))
    link(db, AssistantFile(user_id=user.id, assistant_id=assistant.id, file_id=b.id))
    link(db, AssistantCollection(user_id=user.id, assistant_id=assistant.id, collection_id=collection.id))
    link(db, CollectionFile(user_id=user.id, collection_id=collection.id, file_id=b.id))
    link(db, CollectionFile(user_id=user.id, collection_id=collection.id, file_id=c.id))

    files = assistant_flow.collect_assistant_files(db, assistant.id)

    assert [f.name for f in files] == ["a.txt", "b.txt", "b.txt", "c.txt"]


def test_quick_setting_applies_assistant(db, user, assistant, state):
    old_tool = make_tool(db, user, "old")
    state.selected_tools = [old_tool]
    first, second = make_tool(db, user, "outline"), make_tool(db, user, "beats")
    link(db, AssistantTool(user_id=user.id, assistant_id=assistant.id, tool_id=first.id))
    link(db, AssistantTool(user_id=user.id, assistant_id=assistant.id, tool_id=second.id))
    script = make_file(db, user, "pilot.fountain")
    link(db, AssistantFile(user_id=user.id, assistant_id=assistant.id, file_id=script.id))

    assistant_flow.select_quick_setting(db, state, assistant)

    assert state.selected_assistant is assistant
    assert [t.id for t in state.selected_tools] == [first.id, second.id]
    assert state.chat_files == [ChatFileItem(id=script.id, name="pilot.fountain", type="text")]
    assert state.show_files_display is True
    assert state.chat_settings == ChatSettings(
        model="claude-3-haiku-20240307",
        prompt="You punch up dialogue.",
        temperature=0.8,
        contextLength=8000,
        includeProfileContext=False,
        includeWorkspaceInstructions=True,
        embeddingsProvider="openai",
    )


def test_quick_setting_without_files_leaves_files_panel_alone(db, assistant, state):
    assistant_flow.select_quick_setting(db, state, assistant)

    assert state.chat_files == []
    assert state.show_files_display is False


def test_quick_setting_resolves_stale_model(db, user, state):
    stale = make_assistant(db, user, model="gpt-4o")

    assistant_flow.select_quick_setting(db, state, stale)

    assert state.chat_settings.model == resolve_claude_model_id(None)


def test_none_restores_workspace_defaults(db, assistant, state, home_workspace):
    assistant_flow.select_quick_setting(db, state, assistant)
    assistant_flow.select_quick_setting(db, state, None)

    assert state.selected_assistant is None
    assert state.chat_files == []
    assert state.selected_tools == []
    assert state.chat_settings == ChatSettings(
        model=home_workspace.default_model,
        prompt=home_workspace.default_prompt,
        temperature=home_workspace.default_temperature,
        contextLength=home_workspace.default_context_length,
        includeProfileContext=home_workspace.include_profile_context,
        includeWorkspaceInstructions=home_workspace.include_workspace_instructions,
        embeddingsProvider="openai",
    )


def test_none_without_workspace_keeps_settings(db, assistant):
    state = ChatSessionState()
    state.chat_settings = assistant_flow.assistant_chat_settings(assistant)

    assistant_flow.select_quick_setting(db, state, None)

    assert state.chat_settings == assistant_flow.assistant_chat_settings(assistant)


def test_is_modified(assistant):
    settings = assistant_flow.assistant_chat_settings(assistant)
    assert assistant_flow.is_modified(assistant, settings) is False

    assert assistant_flow.is_modified(assistant, settings.model_copy(update={"temperature": 0.1})) is True
    assert assistant_flow.is_modified(assistant, settings.model_copy(update={"prompt": "Other"})) is True
    assert assistant_flow.is_modified(None, settings) is False
    assert assistant_flow.is_modified(assistant, None) is False


def test_start_chat_prepends_and_selects(db, assistant, state, home_workspace):
    chat, url = assistant_flow.start_chat_with_assistant(db, state, assistant)

    assert url == f"/{home_workspace.id}/chat/{chat.id}"
    assert state.chats[0] is chat
    assert state.selected_assistant is assistant
    assert chat.name == "Chat with Script Doctor"
    assert chat.model == "claude-3-haiku-20240307"
    assert chat.temperature == 0.8
    assert chat.context_length == 8000
    assert chat.include_profile_context is False
    assert chat.embeddings_provider == "openai"


def test_start_chat_failure_leaves_state_unchanged(db, assistant, state, monkeypatch):
    existing = object()
    state.chats = [existing]

    def failing_commit():
        raise RuntimeError("insert failed")

    monkeypatch.setattr(db, "commit", failing_commit)

    with pytest.raises(RuntimeError):
        assistant_flow.start_chat_with_assistant(db, state, assistant)

    assert state.chats == [existing]
    assert state.selected_assistant is None


def test_start_chat_without_workspace_returns_none(db, assistant, profile):
    state = ChatSessionState(profile=profile)

    assert assistant_flow.start_chat_with_assistant(db, state, assistant) is None
    assert state.chats == []


def test_chat_owner_falls_back_to_assistant_owner(assistant, home_workspace):
    state = ChatSessionState(profile=None, selected_workspace=home_workspace)

    chat = assistant_flow.build_assistant_chat(state, assistant)

    assert chat.user_id == assistant.user_id
