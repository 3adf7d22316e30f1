#!/usr/bin/env python3
"""
test_api_skills.py
------------------
Integration tests for /api/skills.

Usage:
    python -m pytest tests/integration/test_api_skills.py -v
"""


class TestSkillQueries:
    """Test list, detail and categories."""

    def test_list_filters(self, client, make_skill):
        """Test category and proficiency filters; names sort ascending."""
        make_skill(name="Svelte", category="frontend", proficiency=5)
        make_skill(name="CSS", category="frontend", proficiency=3)
        make_skill(name="SQLite", category="database", proficiency=4)

        def names(**params):
            return [s["name"] for s in client.get("/api/skills", params=params).json()["data"]]

        assert names() == ["CSS", "SQLite", "Svelte"]
        assert names(category="frontend") == ["CSS", "Svelte"]
        assert names(min_proficiency=4) == ["SQLite", "Svelte"]
        assert names(search="sql") == ["SQLite"]

    def test_categories(self, client, make_skill):
        """Test categories in use with their skills strongest first."""
        make_skill(name="CSS", category="frontend", proficiency=3)
        make_skill(name="Svelte", category="frontend", proficiency=5)
        make_skill(name="Docker", category="tool", proficiency=4)

        data = client.get("/api/skills/categories").json()["data"]
        assert data["categories"] == ["frontend", "tool"]
        assert [s["name"] for s in data["skills"]["frontend"]] == ["Svelte", "CSS"]

    def test_detail_and_missing(self, client, make_skill):
        """Test detail by id and 404 for unknown ids."""
        skill_id = make_skill(name="Go", category="language", years_experience=2)
        data = client.get(f"/api/skills/{skill_id}").json()["data"]
        assert data["name"] == "Go"
        assert data["years_experience"] == 2
        assert client.get("/api/skills/999").status_code == 404


class TestSkillWrites:
    """Test skill writes and their validation."""

    def test_create_defaults(self, client, admin_headers):
        """Test category and proficiency defaults."""
        response = client.post("/api/skills", json={"name": "Bash"}, headers=admin_headers)
        assert response.status_code == 201
        data = response.json()["data"]
        assert data["category"] == "other"
        assert data["proficiency"] == 3

    def test_proficiency_range(self, client, admin_headers):
        """Test proficiency must be between 1 and 5."""
        response = client.post(
            "/api/skills", json={"name": "Rust", "proficiency": 9}, headers=admin_headers
        )
        assert response.status_code == 400
        assert response.json()["error"] == "Proficiency must be between 1 and 5"

    def test_invalid_category(self, client, admin_headers):
        """Test unknown categories are rejected."""
        response = client.post(
            "/api/skills", json={"name": "Rust", "category": "magic"}, headers=admin_headers
        )
        assert response.status_code == 400

    def test_duplicate_name(self, client, admin_headers, make_skill):
        """Test names are unique."""
        make_skill(name="Python")
        response = client.post("/api/skills", json={"name": "Python"}, headers=admin_headers)
        assert response.status_code == 409
        assert response.json()["error"] == "Skill already exists: Python"

    def test_update(self, client, editor_headers, make_skill):
        """Test partial updates keep other fields."""
        skill_id = make_skill(name="Go", category="language", proficiency=2)
        response = client.put(
            f"/api/skills/{skill_id}", json={"proficiency": 4}, headers=editor_headers
        )
        assert response.status_code == 200
        data = response.json()["data"]
        assert data["proficiency"] == 4
        assert data["category"] == "language"
