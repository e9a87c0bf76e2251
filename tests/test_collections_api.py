# =============================================================================
# tests/test_collections_api.py - Collection Endpoint Tests
# =============================================================================

from fastapi.testclient import TestClient


def _activities(fake_supabase, activity_type=None):
    rows = fake_supabase.rows("activities")
    if activity_type:
        rows = [row for row in rows if row["activity_type"] == activity_type]
    return rows


class TestCreateCollection:
    """Tests for POST /api/collections."""

    def test_create(self, client, auth_headers, user, fake_supabase):
        response = client.post(
            "/api/collections",
            json={"title": "Chemistry", "color": "#f97316", "icon": "flask"},
            headers=auth_headers,
        )

        data = response.json()["data"]
        assert response.status_code == 201
        assert data["title"] == "Chemistry"
        assert data["user_id"] == user["user"]["id"]
        assert data["item_count"] == 0

        activity = _activities(fake_supabase, "create")[0]
        assert activity["item_type"] == "collection"
        assert activity["item_id"] == data["id"]
        assert activity["item_title"] == "Chemistry"

    def test_title_required(self, client, auth_headers):
        response = client.post("/api/collections", json={"title": "   "}, headers=auth_headers)

        assert response.status_code == 400
        assert response.json()["error"] == "Please provide a title"

    def test_requires_auth(self, client):
        response = client.post("/api/collections", json={"title": "Chemistry"})

        assert response.status_code == 401


class TestReadCollections:
    """Tests for listing and fetching collections."""

    def test_list_newest_first_with_counts(self, client, auth_headers, collection):
        second = client.post("/api/collections", json={"title": "Physics"}, headers=auth_headers).json()["data"]
        client.post(
            "/api/study-items",
            json={
                "collection_id": collection["id"],
                "type": "note",
                "title": "Mitochondria",
                "content": "Powerhouse of the cell",
            },
            headers=auth_headers,
        )

        response = client.get("/api/collections", headers=auth_headers)

        data = response.json()["data"]
        assert [c["id"] for c in data] == [second["id"], collection["id"]]
        assert data[0]["item_count"] == 0
        assert data[1]["item_count"] == 1

    def test_list_only_own(self, client, collection, other_auth_headers):
        response = client.get("/api/collections", headers=other_auth_headers)

        assert response.json() == {"success": True, "data": []}

    def test_get_one(self, client, auth_headers, collection):
        response = client.get(f"/api/collections/{collection['id']}", headers=auth_headers)

        assert response.status_code == 200
        assert response.json()["data"]["title"] == "Biology"
        assert response.json()["data"]["item_count"] == 0

    def test_other_users_collection_is_not_found(self, client, collection, other_auth_headers):
        response = client.get(f"/api/collections/{collection['id']}", headers=other_auth_headers)

        assert response.status_code == 404
        assert response.json()["error"] == "Collection not found"

    def test_unknown_id(self, client, auth_headers):
        response = client.get("/api/collections/does-not-exist", headers=auth_headers)

        assert response.status_code == 404


class TestUpdateCollection:
    """Tests for PUT /api/collections/{id}."""

    def test_update(self, client, auth_headers, collection, fake_supabase):
        response = client.put(
            f"/api/collections/{collection['id']}",
            json={"title": "Cell Biology", "description": "Updated"},
            headers=auth_headers,
        )

        data = response.json()["data"]
        assert response.status_code == 200
        assert data["title"] == "Cell Biology"
        assert data["description"] == "Updated"
        assert data["item_count"] == 0
        assert data["updated_at"] != collection["updated_at"]

        activity = _activities(fake_supabase, "edit")[0]
        assert activity["item_title"] == "Cell Biology"

    def test_title_only_keeps_optional_fields(self, client, auth_headers, collection, fake_supabase):
        response = client.put(
            f"/api/collections/{collection['id']}",
            json={"title": "Renamed"},
            headers=auth_headers,
        )

        data = response.json()["data"]
        assert response.status_code == 200
        assert data["title"] == "Renamed"
        assert data["description"] == "Cells and energy"
        assert data["color"] == "#22c55e"
        assert fake_supabase.rows("collections")[0]["description"] == "Cells and energy"

    def test_explicit_null_clears_field(self, client, auth_headers, collection):
        response = client.put(
            f"/api/collections/{collection['id']}",
            json={"title": "Biology", "description": None},
            headers=auth_headers,
        )

        data = response.json()["data"]
        assert data["description"] is None
        assert data["color"] == "#22c55e"

    def test_title_required(self, client, auth_headers, collection):
        response = client.put(
            f"/api/collections/{collection['id']}",
            json={"description": "No title"},
            headers=auth_headers,
        )

        assert response.status_code == 400

    def test_not_owner(self, client, collection, other_auth_headers, fake_supabase):
        response = client.put(
            f"/api/collections/{collection['id']}",
            json={"title": "Hijacked"},
            headers=other_auth_headers,
        )

        assert response.status_code == 404
        assert fake_supabase.rows("collections")[0]["title"] == "Biology"


class TestDeleteCollection:
    """Tests for DELETE /api/collections/{id}."""

    def test_delete(self, client, auth_headers, collection, fake_supabase):
        response = client.delete(f"/api/collections/{collection['id']}", headers=auth_headers)

        assert response.status_code == 200
        assert response.json()["data"] == "Collection deleted successfully"
        assert fake_supabase.rows("collections") == []

        activity = _activities(fake_supabase, "delete")[0]
        assert activity["item_title"] == "Biology"

    def test_not_owner(self, client, collection, other_auth_headers, fake_supabase):
        response = client.delete(f"/api/collections/{collection['id']}", headers=other_auth_headers)

        assert response.status_code == 404
        assert len(fake_supabase.rows("collections")) == 1


class TestCollectionContents:
    """Tests for the items and flashcards of a collection."""

    def test_items(self, client, auth_headers, collection):
        for title in ("First", "Second"):
            client.post(
                "/api/study-items",
                json={"collection_id": collection["id"], "type": "note", "title": title, "content": "..."},
                headers=auth_headers,
            )

        response = client.get(f"/api/collections/{collection['id']}/items", headers=auth_headers)

        assert [item["title"] for item in response.json()["data"]] == ["Second", "First"]

    def test_flashcards(self, client, auth_headers, collection):
        client.post(
            "/api/flashcards",
            json={
                "title": "Organelles",
                "collection_id": collection["id"],
                "cards": [{"question": "Powerhouse?", "answer": "Mitochondria"}],
            },
            headers=auth_headers,
        )

        response = client.get(f"/api/collections/{collection['id']}/flashcards", headers=auth_headers)

        sets = response.json()["data"]
        assert len(sets) == 1
        assert sets[0]["cards"][0]["answer"] == "Mitochondria"

    def test_contents_of_other_users_collection(self, client, collection, other_auth_headers):
        response = client.get(f"/api/collections/{collection['id']}/items", headers=other_auth_headers)

        assert response.status_code == 404


class TestDatabaseFailures:
    """Unexpected database failures surface as a generic 500."""

    def test_list_failure(self, app, auth_headers, fake_supabase):
        fake_supabase.failing_tables.add("collections")

        with TestClient(app, raise_server_exceptions=False) as client:
            response = client.get("/api/collections", headers=auth_headers)

        assert response.status_code == 500
        assert response.json()["success"] is False
        assert response.json()["error"] == "Error fetching collections"

    def test_activity_failure_does_not_fail_create(self, client, auth_headers, fake_supabase):
        fake_supabase.failing_tables.add("activities")

        response = client.post("/api/collections", json={"title": "Still works"}, headers=auth_headers)

        assert response.status_code == 201
