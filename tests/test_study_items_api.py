# =============================================================================
# tests/test_study_items_api.py - Study Item Endpoint Tests
# =============================================================================
# CRUD, ownership, study tracking and audio generation. The ElevenLabs call
# is mocked at httpx.post.
# =============================================================================

from unittest.mock import patch

import httpx
import pytest

AUDIO_BYTES = b"ID3\x03\x00fake-mp3"


def _tts_response(status_code=200, content=AUDIO_BYTES):
    request = httpx.Request("POST", "https://api.elevenlabs.io/v1/text-to-speech/voice")
    return httpx.Response(status_code, content=content, request=request)


@pytest.fixture
def note(client, auth_headers, collection):
    response = client.post(
        "/api/study-items",
        json={
            "collection_id": collection["id"],
            "type": "note",
            "title": "Mitochondria",
            "content": "The powerhouse of the cell",
            "tags": ["cells"],
        },
        headers=auth_headers,
    )
    assert response.status_code == 201, response.text
    return response.json()["data"]


@pytest.fixture
def flashcard_item(client, auth_headers, collection):
    response = client.post(
        "/api/study-items",
        json={
            "collection_id": collection["id"],
            "type": "flashcard",
            "title": "ATP",
            "content": "What is ATP? ||| The cell's energy currency",
        },
        headers=auth_headers,
    )
    assert response.status_code == 201, response.text
    return response.json()["data"]


class TestCreateStudyItem:
    """Tests for POST /api/study-items."""

    def test_create(self, note, collection, user, fake_supabase):
        assert note["collection_id"] == collection["id"]
        assert note["user_id"] == user["user"]["id"]
        assert note["type"] == "note"
        assert note["tags"] == ["cells"]
        assert note["study_count"] == 0

        activity = [a for a in fake_supabase.rows("activities") if a["item_id"] == note["id"]][0]
        assert activity["activity_type"] == "create"
        assert activity["item_type"] == "note"
        assert activity["collection_id"] == collection["id"]

    def test_tags_default_to_empty(self, flashcard_item):
        assert flashcard_item["tags"] == []

    def test_missing_fields(self, client, auth_headers, collection):
        response = client.post(
            "/api/study-items",
            json={"collection_id": collection["id"], "title": "No content", "type": "note"},
            headers=auth_headers,
        )

        assert response.status_code == 400
        assert response.json()["error"] == "Please provide title, content, type, and collection_id"

    def test_invalid_type(self, client, auth_headers, collection):
        response = client.post(
            "/api/study-items",
            json={"collection_id": collection["id"], "title": "T", "content": "C", "type": "essay"},
            headers=auth_headers,
        )

        body = response.json()
        assert response.status_code == 400
        assert body["error"] == "Invalid study item type"
        assert body["details"]["allowed_types"] == ["note", "flashcard", "quiz"]

    def test_other_users_collection(self, client, collection, other_auth_headers, fake_supabase):
        response = client.post(
            "/api/study-items",
            json={"collection_id": collection["id"], "title": "T", "content": "C", "type": "note"},
            headers=other_auth_headers,
        )

        assert response.status_code == 404
        assert response.json()["error"] == "Collection not found"
        assert fake_supabase.rows("study_items") == []


class TestReadUpdateDelete:
    """Tests for GET/PUT/DELETE /api/study-items/{id}."""

    def test_get(self, client, auth_headers, note):
        response = client.get(f"/api/study-items/{note['id']}", headers=auth_headers)

        assert response.status_code == 200
        assert response.json()["data"]["title"] == "Mitochondria"

    def test_get_other_users_item(self, client, note, other_auth_headers):
        response = client.get(f"/api/study-items/{note['id']}", headers=other_auth_headers)

        assert response.status_code == 404
        assert response.json()["error"] == "Study item not found"

    def test_update(self, client, auth_headers, note, fake_supabase):
        response = client.put(
            f"/api/study-items/{note['id']}",
            json={"title": "Mito", "content": "ATP factory", "type": "quiz", "tags": ["bio"]},
            headers=auth_headers,
        )

        data = response.json()["data"]
        assert response.status_code == 200
        assert data["title"] == "Mito"
        assert data["type"] == "quiz"
        assert data["tags"] == ["bio"]

        edits = [a for a in fake_supabase.rows("activities") if a["activity_type"] == "edit"]
        assert edits[0]["item_id"] == note["id"]

    def test_update_without_tags_keeps_them(self, client, auth_headers, note):
        response = client.put(
            f"/api/study-items/{note['id']}",
            json={"title": "Mito", "content": "ATP factory", "type": "note"},
            headers=auth_headers,
        )

        assert response.status_code == 200
        assert response.json()["data"]["tags"] == ["cells"]

    def test_update_missing_fields(self, client, auth_headers, note):
        response = client.put(
            f"/api/study-items/{note['id']}",
            json={"title": "Only title"},
            headers=auth_headers,
        )

        assert response.status_code == 400
        assert response.json()["error"] == "Please provide title, content, and type"

    def test_update_other_users_item(self, client, note, other_auth_headers):
        response = client.put(
            f"/api/study-items/{note['id']}",
            json={"title": "T", "content": "C", "type": "note"},
            headers=other_auth_headers,
        )

        assert response.status_code == 404

    def test_delete(self, client, auth_headers, note, fake_supabase):
        response = client.delete(f"/api/study-items/{note['id']}", headers=auth_headers)

        assert response.status_code == 200
        assert response.json()["data"] == "Study item deleted successfully"
        assert fake_supabase.rows("study_items") == []

        deletes = [a for a in fake_supabase.rows("activities") if a["activity_type"] == "delete"]
        assert deletes[0]["item_type"] == "note"
        assert deletes[0]["item_title"] == "Mitochondria"

    def test_delete_removes_stored_audio(self, client, auth_headers, note, fake_supabase):
        with patch("core.services.speech_service.httpx.post", return_value=_tts_response()):
            client.post(f"/api/study-items/{note['id']}/audio", headers=auth_headers)
        assert len(fake_supabase.storage.files) == 1

        client.delete(f"/api/study-items/{note['id']}", headers=auth_headers)

        assert fake_supabase.storage.files == {}


class TestStudyTracking:
    """Tests for POST /api/study-items/{id}/study."""

    def test_record_study(self, client, auth_headers, note, fake_supabase):
        client.post(f"/api/study-items/{note['id']}/study", json={"duration": 90}, headers=auth_headers)
        response = client.post(f"/api/study-items/{note['id']}/study", headers=auth_headers)

        data = response.json()["data"]
        assert response.status_code == 200
        assert data["study_count"] == 2
        assert data["last_studied"] is not None

        studies = [a for a in fake_supabase.rows("activities") if a["activity_type"] == "study"]
        assert len(studies) == 2
        assert studies[0]["duration"] == 90
        assert "duration" not in studies[1]

    def test_record_study_other_user(self, client, note, other_auth_headers):
        response = client.post(f"/api/study-items/{note['id']}/study", headers=other_auth_headers)

        assert response.status_code == 404


class TestAudioGeneration:
    """Tests for POST /api/study-items/{id}/audio."""

    def test_note_audio(self, client, auth_headers, note, fake_supabase):
        with patch("core.services.speech_service.httpx.post", return_value=_tts_response()) as mock_post:
            response = client.post(f"/api/study-items/{note['id']}/audio", headers=auth_headers)

        audio_url = response.json()["data"]["audio_url"]
        assert response.status_code == 200
        assert "/object/public/audio/audio_" in audio_url
        assert audio_url.endswith(".mp3")

        sent = mock_post.call_args.kwargs
        assert sent["json"]["text"] == "The powerhouse of the cell"
        assert sent["json"]["model_id"] == "eleven_monolingual_v1"
        assert sent["json"]["voice_settings"] == {"stability": 0.5, "similarity_boost": 0.5}
        assert sent["headers"]["xi-api-key"] == "test-elevenlabs-key"
        assert mock_post.call_args.args[0].endswith("/text-to-speech/21m00Tcm4TlvDq8ikWAM")

        (bucket, path), stored = next(iter(fake_supabase.storage.files.items()))
        assert bucket == "audio"
        assert path.startswith(f"audio_{note['id']}_")
        assert stored["content"] == AUDIO_BYTES
        assert stored["options"]["content-type"] == "audio/mpeg"

        assert fake_supabase.rows("study_items")[0]["audio_url"] == audio_url

    def test_flashcard_reads_answer(self, client, auth_headers, flashcard_item):
        with patch("core.services.speech_service.httpx.post", return_value=_tts_response()) as mock_post:
            client.post(f"/api/study-items/{flashcard_item['id']}/audio", headers=auth_headers)

        assert mock_post.call_args.kwargs["json"]["text"] == "The cell's energy currency"

    def test_long_content_is_capped(self, client, auth_headers, collection):
        item = client.post(
            "/api/study-items",
            json={"collection_id": collection["id"], "type": "note", "title": "Long", "content": "x" * 7000},
            headers=auth_headers,
        ).json()["data"]

        with patch("core.services.speech_service.httpx.post", return_value=_tts_response()) as mock_post:
            client.post(f"/api/study-items/{item['id']}/audio", headers=auth_headers)

        assert len(mock_post.call_args.kwargs["json"]["text"]) == 5000

    def test_vendor_failure(self, client, auth_headers, note, fake_supabase):
        with patch("core.services.speech_service.httpx.post", return_value=_tts_response(500, b"oops")):
            response = client.post(f"/api/study-items/{note['id']}/audio", headers=auth_headers)

        assert response.status_code == 500
        assert response.json()["error"] == "Server error"
        assert fake_supabase.rows("study_items")[0]["audio_url"] is None

    def test_upload_failure(self, client, auth_headers, note, fake_supabase):
        fake_supabase.storage.fail_uploads = True

        with patch("core.services.speech_service.httpx.post", return_value=_tts_response()):
            response = client.post(f"/api/study-items/{note['id']}/audio", headers=auth_headers)

        assert response.status_code == 500
        assert response.json()["error"] == "Error uploading audio file"

    def test_other_users_item(self, client, note, other_auth_headers):
        with patch("core.services.speech_service.httpx.post") as mock_post:
            response = client.post(f"/api/study-items/{note['id']}/audio", headers=other_auth_headers)

        assert response.status_code == 404
        mock_post.assert_not_called()
