"""Tests for API endpoints (no external API keys required)."""

from unittest.mock import MagicMock, patch

from fastapi.testclient import TestClient

from taskflow.api.main import app
from taskflow.config import Settings
from taskflow.errors import TranscriptionError
from taskflow.extraction.models import ExtractedTask, Priority

client = TestClient(app)
client_no_raise = TestClient(app, raise_server_exceptions=False)


def _settings(**overrides: object) -> Settings:
    values: dict[str, object] = {"openai_api_key": "", "anthropic_api_key": "", "llm_provider": "openai"}
    values.update(overrides)
    return Settings(_env_file=None, **values)  # type: ignore[call-arg, arg-type]


def test_health():
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "healthy"}


# --- Text to task ---


def test_text_to_task_without_key_uses_rules():
    with patch("taskflow.api.routes.extraction.settings", _settings()):
        response = client.post(
            "/api/text-to-task",
            json={"text": "Remind me to call the investor, it's urgent"},
        )

    assert response.status_code == 200
    data = response.json()
    assert data["source"] == "rules"
    assert data["title"] == "call the investor"
    assert data["priority"] == "p0"
    assert data["tags"] == ["investor", "call"]
    assert data["campaign"] == "Fundraising 2025"
    assert data["description"] == "Remind me to call the investor, it's urgent"


def test_text_to_task_requires_text():
    response = client.post("/api/text-to-task", json={})
    assert response.status_code == 422


def test_text_to_task_rejects_blank_text():
    response = client.post("/api/text-to-task", json={"text": "   "})
    assert response.status_code == 422


def test_text_to_task_remote_failure_still_returns_task():
    """An LLM error never reaches the client; the rule path answers instead."""
    with (
        patch("taskflow.api.routes.extraction.settings", _settings(openai_api_key="sk-test")),
        patch("taskflow.extraction.service.extract_remote", side_effect=RuntimeError("down")),
    ):
        response = client.post("/api/text-to-task", json={"text": "Need to fix the bug asap"})

    assert response.status_code == 200
    data = response.json()
    assert data["source"] == "rules"
    assert data["title"] == "fix the bug asap"
    assert data["priority"] == "p0"


def test_text_to_task_remote_success():
    remote_task = ExtractedTask(
        title="Fix login bug",
        description="Fix the login bug before Friday",
        priority=Priority.HIGH,
        tags=("bug",),
        due_date="2025-05-02",
    )
    with (
        patch("taskflow.api.routes.extraction.settings", _settings(openai_api_key="sk-test")),
        patch("taskflow.extraction.service.extract_remote", return_value=remote_task),
    ):
        response = client.post("/api/text-to-task", json={"text": "fix login bug by friday"})

    assert response.status_code == 200
    data = response.json()
    assert data["source"] == "remote"
    assert data["due_date"] == "2025-05-02"
    assert data["campaign"] is None


# --- Voice to task ---


def test_voice_to_task_no_key_returns_501():
    with patch("taskflow.api.routes.extraction.settings", _settings()):
        response = client.post(
            "/api/voice-to-task",
            files={"file": ("recording.webm", b"\x1a\x45\xdf\xa3" + b"\x00" * 100, "audio/webm")},
        )
    assert response.status_code == 501
    assert "not configured" in response.json()["detail"].lower()


def test_voice_to_task_transcribes_then_extracts():
    with (
        patch("taskflow.api.routes.extraction.settings", _settings(openai_api_key="sk-test")),
        patch(
            "taskflow.api.routes.extraction.transcribe_audio",
            return_value="Need to email the customer, not urgent",
        ) as mock_transcribe,
        patch("taskflow.extraction.service.extract_remote", side_effect=RuntimeError("down")),
    ):
        response = client.post(
            "/api/voice-to-task",
            files={"file": ("memo.mp3", b"\xff\xfb\x90\x00" + b"\x00" * 100, "audio/mpeg")},
        )

    assert response.status_code == 200, response.text
    data = response.json()
    assert data["transcript"] == "Need to email the customer, not urgent"
    assert data["title"] == "email the customer"
    assert data["tags"] == ["customer", "email"]
    assert data["source"] == "rules"
    assert mock_transcribe.call_args.args[2] == "memo.mp3"


def test_voice_to_task_unknown_extension_renamed():
    with (
        patch("taskflow.api.routes.extraction.settings", _settings(openai_api_key="sk-test")),
        patch(
            "taskflow.api.routes.extraction.transcribe_audio", return_value="Water the plants"
        ) as mock_transcribe,
        patch("taskflow.extraction.service.extract_remote", side_effect=RuntimeError("down")),
    ):
        response = client.post(
            "/api/voice-to-task",
            files={"file": ("blob", b"\x00" * 10, "application/octet-stream")},
        )

    assert response.status_code == 200
    assert mock_transcribe.call_args.args[2] == "recording.webm"


def test_voice_to_task_empty_upload_returns_400():
    with patch("taskflow.api.routes.extraction.settings", _settings(openai_api_key="sk-test")):
        response = client.post(
            "/api/voice-to-task",
            files={"file": ("recording.webm", b"", "audio/webm")},
        )
    assert response.status_code == 400


def test_voice_to_task_transcription_failure_returns_503():
    with (
        patch("taskflow.api.routes.extraction.settings", _settings(openai_api_key="sk-test")),
        patch(
            "taskflow.api.routes.extraction.transcribe_audio",
            side_effect=TranscriptionError("Whisper API error: 500"),
        ),
    ):
        response = client.post(
            "/api/voice-to-task",
            files={"file": ("recording.webm", b"\x00" * 10, "audio/webm")},
        )
    assert response.status_code == 503


def test_voice_to_task_silence_returns_400():
    with (
        patch("taskflow.api.routes.extraction.settings", _settings(openai_api_key="sk-test")),
        patch("taskflow.api.routes.extraction.transcribe_audio", return_value=""),
    ):
        response = client.post(
            "/api/voice-to-task",
            files={"file": ("recording.webm", b"\x00" * 10, "audio/webm")},
        )
    assert response.status_code == 400


# --- Tasks ---


def test_create_task_resolves_campaign():
    with (
        patch("taskflow.api.routes.tasks.get_supabase_client", return_value=MagicMock()),
        patch("taskflow.api.routes.tasks.find_campaign_id", return_value="camp-1") as mock_find,
        patch("taskflow.api.routes.tasks.store_task", return_value="task-1") as mock_store,
    ):
        response = client.post(
            "/api/tasks",
            json={
                "title": "call the investor",
                "description": "Remind me to call the investor",
                "priority": "p0",
                "tags": ["investor", "call"],
                "campaign": "Fundraising 2025",
            },
        )

    assert response.status_code == 201
    assert response.json() == {"id": "task-1", "campaign_id": "camp-1"}
    mock_find.assert_called_once()
    stored: ExtractedTask = mock_store.call_args.args[1]
    assert stored.priority is Priority.CRITICAL
    assert stored.tags == ("investor", "call")
    assert mock_store.call_args.kwargs["campaign_id"] == "camp-1"


def test_create_task_campaign_lookup_failure_is_not_fatal():
    with (
        patch("taskflow.api.routes.tasks.get_supabase_client", return_value=MagicMock()),
        patch("taskflow.api.routes.tasks.find_campaign_id", side_effect=RuntimeError("no table")),
        patch("taskflow.api.routes.tasks.store_task", return_value="task-2"),
    ):
        response = client.post(
            "/api/tasks",
            json={"title": "launch page", "campaign": "Product Launch"},
        )

    assert response.status_code == 201
    assert response.json() == {"id": "task-2", "campaign_id": None}


def test_create_task_storage_failure_returns_503():
    with (
        patch("taskflow.api.routes.tasks.get_supabase_client", return_value=MagicMock()),
        patch("taskflow.api.routes.tasks.store_task", side_effect=RuntimeError("offline")),
    ):
        response = client.post("/api/tasks", json={"title": "x"})
    assert response.status_code == 503


def test_create_task_validation():
    assert client.post("/api/tasks", json={"title": ""}).status_code == 422
    assert client.post("/api/tasks", json={"title": "x", "priority": "p7"}).status_code == 422
    too_many = {"title": "x", "tags": ["a", "b", "c", "d", "e"]}
    assert client.post("/api/tasks", json=too_many).status_code == 422


def test_create_task_rejects_whitespace_title():
    with patch("taskflow.api.routes.tasks.store_task") as mock_store:
        response = client.post("/api/tasks", json={"title": "   ", "tags": [" bug ", "  "]})
    assert response.status_code == 422
    mock_store.assert_not_called()


def test_create_task_strips_title_and_tags():
    with (
        patch("taskflow.api.routes.tasks.get_supabase_client", return_value=MagicMock()),
        patch("taskflow.api.routes.tasks.store_task", return_value="task-3") as mock_store,
    ):
        response = client.post(
            "/api/tasks",
            json={"title": "  fix login  ", "tags": [" bug ", "  ", "auth"]},
        )

    assert response.status_code == 201
    stored: ExtractedTask = mock_store.call_args.args[1]
    assert stored.title == "fix login"
    assert stored.tags == ("bug", "auth")


def test_create_task_without_storage_config_returns_503():
    empty = _settings(supabase_url="", supabase_key="")
    with (
        patch("taskflow.storage.settings", empty),
        patch("taskflow.api.routes.tasks.store_task") as mock_store,
    ):
        response = client.post("/api/tasks", json={"title": "x"})

    assert response.status_code == 503
    assert "storage unavailable" in response.json()["detail"]
    mock_store.assert_not_called()


def test_update_task_status():
    row = {"id": "1", "title": "call the investor", "status": "done", "priority": "p0"}
    with (
        patch("taskflow.api.routes.tasks.get_supabase_client", return_value=MagicMock()),
        patch("taskflow.api.routes.tasks.update_task", return_value=row) as mock_update,
    ):
        response = client.patch("/api/tasks/1", json={"status": "done"})

    assert response.status_code == 200
    assert response.json()["status"] == "done"
    assert mock_update.call_args.args[1:] == ("1", {"status": "done"})


def test_update_task_normalises_fields():
    row = {"id": "1", "title": "fix login", "status": "blocked"}
    with (
        patch("taskflow.api.routes.tasks.get_supabase_client", return_value=MagicMock()),
        patch("taskflow.api.routes.tasks.update_task", return_value=row) as mock_update,
    ):
        response = client.patch(
            "/api/tasks/1",
            json={"title": " fix login ", "status": "blocked", "tags": ["  "], "priority": None},
        )

    assert response.status_code == 200
    assert mock_update.call_args.args[2] == {"title": "fix login", "status": "blocked", "tags": None}


def test_update_task_not_found():
    with (
        patch("taskflow.api.routes.tasks.get_supabase_client", return_value=MagicMock()),
        patch("taskflow.api.routes.tasks.update_task", return_value=None),
    ):
        response = client.patch("/api/tasks/missing", json={"status": "in_progress"})
    assert response.status_code == 404


def test_update_task_validation():
    assert client.patch("/api/tasks/1", json={}).status_code == 400
    assert client.patch("/api/tasks/1", json={"priority": None}).status_code == 400
    assert client.patch("/api/tasks/1", json={"title": "   "}).status_code == 422
    assert client.patch("/api/tasks/1", json={"status": "archived"}).status_code == 422


def test_list_tasks():
    rows = [
        {
            "id": "1",
            "title": "call the investor",
            "description": "Remind me to call the investor",
            "status": "todo",
            "priority": "p0",
            "tags": ["investor"],
            "campaign_id": None,
            "created_at": "2025-04-01T10:00:00Z",
        }
    ]
    with (
        patch("taskflow.api.routes.tasks.get_supabase_client", return_value=MagicMock()),
        patch("taskflow.api.routes.tasks.list_tasks", return_value=rows) as mock_list,
    ):
        response = client.get("/api/tasks", params={"status": "todo", "priority": "p0"})

    assert response.status_code == 200
    data = response.json()
    assert data[0]["id"] == "1"
    assert data[0]["priority"] == "p0"
    assert mock_list.call_args.kwargs == {"status": "todo", "priority": "p0"}


def test_list_tasks_rejects_unknown_status():
    response = client.get("/api/tasks", params={"status": "archived"})
    assert response.status_code == 422


def test_get_task_not_found():
    with (
        patch("taskflow.api.routes.tasks.get_supabase_client", return_value=MagicMock()),
        patch("taskflow.api.routes.tasks.get_task", return_value=None),
    ):
        response = client.get("/api/tasks/missing")
    assert response.status_code == 404


def test_delete_task():
    with (
        patch("taskflow.api.routes.tasks.get_supabase_client", return_value=MagicMock()),
        patch("taskflow.api.routes.tasks.delete_task", return_value=True),
    ):
        response = client.delete("/api/tasks/1")
    assert response.status_code == 204


def test_delete_task_not_found():
    with (
        patch("taskflow.api.routes.tasks.get_supabase_client", return_value=MagicMock()),
        patch("taskflow.api.routes.tasks.delete_task", return_value=False),
    ):
        response = client.delete("/api/tasks/1")
    assert response.status_code == 404


def test_routes_registered():
    routes = [r.path for r in app.routes]  # type: ignore[union-attr]
    for path in ["/api/text-to-task", "/api/voice-to-task", "/api/tasks", "/api/tasks/{task_id}"]:
        assert path in routes
