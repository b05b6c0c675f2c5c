"""
Test suite for job-related endpoints and functionality.

Tests cover:
- Job creation and slug handling
- Listing with search, status filter, sorting and pagination
- Partial updates
- Drag-and-drop reordering and its rollback
- Deletion
"""

import pytest
from talentflow.crud.job import generate_slug
from talentflow.models.job import Job, JobStatus


def board_orders(client):
    """Return [(title, order)] for the whole board in display order."""
    jobs = client.get("/api/jobs?pageSize=100").json()["jobs"]
    return [(job["title"], job["order"]) for job in jobs]


class TestJobCreation:
    """Tests for job creation endpoint"""

    def test_create_job_success(self, client, sample_job_data):
        """Test successful job creation"""
        response = client.post("/api/jobs", json=sample_job_data)

        assert response.status_code == 201
        data = response.json()
        assert data["id"] > 0
        assert data["slug"] == "senior-frontend-developer"
        assert data["status"] == "active"
        assert data["order"] == 0
        assert data["tags"] == ["React", "JavaScript", "CSS"]
        assert "createdAt" in data

    def test_new_jobs_are_appended_to_the_board(self, make_jobs):
        """Each new job gets the next board position"""
        jobs = make_jobs("First", "Second", "Third")
        assert [job["order"] for job in jobs] == [0, 1, 2]

    def test_blank_tags_and_requirements_are_dropped(self, client):
        response = client.post("/api/jobs", json={
            "title": "QA Engineer",
            "tags": ["Testing", "  ", ""],
            "requirements": ["", "Automation experience "],
        })

        assert response.status_code == 201
        data = response.json()
        assert data["tags"] == ["Testing"]
        assert data["requirements"] == ["Automation experience"]

    def test_create_job_missing_title(self, client):
        """Test job creation with missing required fields"""
        response = client.post("/api/jobs", json={"description": "No title here"})

        assert response.status_code == 422

    def test_blank_title_rejected(self, client):
        response = client.post("/api/jobs", json={"title": "   "})

        assert response.status_code == 422

    def test_duplicate_slug_conflicts(self, client, sample_job_data):
        client.post("/api/jobs", json=sample_job_data)
        response = client.post("/api/jobs", json=sample_job_data)

        assert response.status_code == 409
        assert "already exists" in response.json()["detail"]

    def test_explicit_slug(self, client):
        response = client.post("/api/jobs", json={"title": "Data Scientist", "slug": "data-scientist-2"})

        assert response.status_code == 201
        assert response.json()["slug"] == "data-scientist-2"

    def test_blank_slug_is_derived_from_title(self, client):
        response = client.post("/api/jobs", json={"title": "Data Scientist", "slug": "  "})

        assert response.status_code == 201
        assert response.json()["slug"] == "data-scientist"

    def test_title_without_slug_characters_rejected(self, client):
        response = client.post("/api/jobs", json={"title": "!!!"})

        assert response.status_code == 422
        assert client.get("/api/jobs").json()["pagination"]["total"] == 0

    def test_title_without_slug_characters_with_explicit_slug(self, client):
        response = client.post("/api/jobs", json={"title": "???", "slug": "mystery-role"})

        assert response.status_code == 201
        assert response.json()["slug"] == "mystery-role"


class TestSlugGeneration:

    @pytest.mark.parametrize("title,slug", [
        ("Senior Frontend Developer", "senior-frontend-developer"),
        ("  C++ / Rust Engineer!! ", "c-rust-engineer"),
        ("Full-Stack Developer 2", "full-stack-developer-2"),
    ])
    def test_generate_slug(self, title, slug):
        assert generate_slug(title) == slug


class TestJobRetrieval:
    """Tests for job retrieval endpoints"""

    def test_get_job_by_id(self, client, sample_job_data):
        """Test retrieving a job by ID"""
        job_id = client.post("/api/jobs", json=sample_job_data).json()["id"]

        response = client.get(f"/api/jobs/{job_id}")

        assert response.status_code == 200
        data = response.json()
        assert data["id"] == job_id
        assert data["title"] == sample_job_data["title"]

    def test_get_job_by_slug(self, client, sample_job_data):
        client.post("/api/jobs", json=sample_job_data)

        response = client.get("/api/jobs/slug/senior-frontend-developer")

        assert response.status_code == 200
        assert response.json()["title"] == sample_job_data["title"]

    def test_get_nonexistent_job(self, client):
        """Test retrieving a job that doesn't exist"""
        response = client.get("/api/jobs/99999")

        assert response.status_code == 404
        assert "not found" in response.json()["detail"].lower()

    def test_list_jobs_pagination(self, client, make_jobs):
        """Test job listing with pagination metadata"""
        make_jobs(*[f"Job {i}" for i in range(5)])

        response = client.get("/api/jobs?page=1&pageSize=3")
        data = response.json()
        assert [job["title"] for job in data["jobs"]] == ["Job 0", "Job 1", "Job 2"]
        assert data["pagination"] == {"page": 1, "pageSize": 3, "total": 5, "totalPages": 2}

        response = client.get("/api/jobs?page=2&pageSize=3")
        assert [job["title"] for job in response.json()["jobs"]] == ["Job 3", "Job 4"]

    def test_page_past_the_end_is_empty(self, client, make_jobs):
        make_jobs("Only Job")

        data = client.get("/api/jobs?page=5").json()
        assert data["jobs"] == []
        assert data["pagination"]["total"] == 1

    def test_invalid_page_size(self, client):
        assert client.get("/api/jobs?pageSize=0").status_code == 422
        assert client.get("/api/jobs?page=0").status_code == 422

    def test_search_matches_title_and_tags(self, client):
        client.post("/api/jobs", json={"title": "Backend Engineer", "tags": ["Python", "API"]})
        client.post("/api/jobs", json={"title": "Data Scientist", "tags": ["python", "ML"]})
        client.post("/api/jobs", json={"title": "UX Designer", "tags": ["Figma"]})

        titles = [job["title"] for job in client.get("/api/jobs?search=PYTHON").json()["jobs"]]
        assert titles == ["Backend Engineer", "Data Scientist"]

        titles = [job["title"] for job in client.get("/api/jobs?search=design").json()["jobs"]]
        assert titles == ["UX Designer"]

    def test_filter_jobs_by_status(self, client, db_session):
        """Test filtering jobs by status"""
        db_session.add_all([
            Job(title="Open", slug="open", status=JobStatus.ACTIVE, requirements=[], tags=[], order=0),
            Job(title="Closed", slug="closed", status=JobStatus.ARCHIVED, requirements=[], tags=[], order=1),
        ])
        db_session.commit()

        data = client.get("/api/jobs?status=archived").json()
        assert [job["title"] for job in data["jobs"]] == ["Closed"]
        assert data["pagination"]["total"] == 1

    def test_sort_by_title(self, client, make_jobs):
        make_jobs("Product Manager", "Backend Engineer", "QA Engineer")

        titles = [job["title"] for job in client.get("/api/jobs?sort=title").json()["jobs"]]
        assert titles == ["Backend Engineer", "Product Manager", "QA Engineer"]

    def test_sort_by_created_at_newest_first(self, client, make_jobs):
        make_jobs("Oldest", "Middle", "Newest")

        titles = [job["title"] for job in client.get("/api/jobs?sort=createdAt").json()["jobs"]]
        assert titles == ["Newest", "Middle", "Oldest"]

    def test_unknown_sort_rejected(self, client):
        assert client.get("/api/jobs?sort=salary").status_code == 422


class TestJobUpdate:

    def test_archive_job(self, client, sample_job_data):
        job_id = client.post("/api/jobs", json=sample_job_data).json()["id"]

        response = client.patch(f"/api/jobs/{job_id}", json={"status": "archived"})

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "archived"
        assert data["title"] == sample_job_data["title"]

    def test_title_change_regenerates_slug(self, client, sample_job_data):
        job_id = client.post("/api/jobs", json=sample_job_data).json()["id"]

        data = client.patch(f"/api/jobs/{job_id}", json={"title": "Staff Frontend Developer"}).json()

        assert data["slug"] == "staff-frontend-developer"

    def test_update_to_taken_slug_conflicts(self, client, make_jobs):
        first, second = make_jobs("First Job", "Second Job")

        response = client.patch(f"/api/jobs/{second['id']}", json={"slug": first["slug"]})

        assert response.status_code == 409

    def test_blank_slug_keeps_current_slug(self, client, sample_job_data):
        job = client.post("/api/jobs", json=sample_job_data).json()

        response = client.patch(f"/api/jobs/{job['id']}", json={"slug": ""})

        assert response.status_code == 200
        assert response.json()["slug"] == job["slug"]
        assert client.get(f"/api/jobs/slug/{job['slug']}").status_code == 200

    def test_blank_slug_with_new_title_regenerates(self, client, sample_job_data):
        job = client.post("/api/jobs", json=sample_job_data).json()

        data = client.patch(f"/api/jobs/{job['id']}", json={"title": "Tech Lead", "slug": ""}).json()

        assert data["slug"] == "tech-lead"

    def test_title_without_slug_characters_rejected(self, client, sample_job_data):
        job = client.post("/api/jobs", json=sample_job_data).json()

        response = client.patch(f"/api/jobs/{job['id']}", json={"title": "!!!"})

        assert response.status_code == 422
        assert client.get(f"/api/jobs/{job['id']}").json()["title"] == job["title"]

    def test_order_is_not_editable(self, client, make_jobs):
        first, second = make_jobs("First Job", "Second Job")

        response = client.patch(f"/api/jobs/{second['id']}", json={"order": 0, "status": "archived"})

        assert response.status_code == 200
        assert response.json()["order"] == second["order"]
        assert client.get(f"/api/jobs/{first['id']}").json()["order"] == 0

    def test_update_nonexistent_job(self, client):
        response = client.patch("/api/jobs/99999", json={"status": "archived"})
        assert response.status_code == 404


class TestJobReorder:
    """Tests for drag-and-drop reordering"""

    def test_move_down(self, client, make_jobs):
        jobs = make_jobs("A", "B", "C", "D")

        response = client.patch(f"/api/jobs/{jobs[0]['id']}/reorder", json={"fromOrder": 0, "toOrder": 2})

        assert response.status_code == 200
        assert response.json()["success"] is True
        assert board_orders(client) == [("B", 0), ("C", 1), ("A", 2), ("D", 3)]

    def test_move_up(self, client, make_jobs):
        jobs = make_jobs("A", "B", "C", "D")

        client.patch(f"/api/jobs/{jobs[3]['id']}/reorder", json={"fromOrder": 3, "toOrder": 1})

        assert board_orders(client) == [("A", 0), ("D", 1), ("B", 2), ("C", 3)]

    def test_move_to_same_position_is_noop(self, client, make_jobs):
        jobs = make_jobs("A", "B")

        response = client.patch(f"/api/jobs/{jobs[1]['id']}/reorder", json={"fromOrder": 1, "toOrder": 1})

        assert response.status_code == 200
        assert board_orders(client) == [("A", 0), ("B", 1)]

    def test_stale_from_order_conflicts(self, client, make_jobs):
        jobs = make_jobs("A", "B", "C")

        response = client.patch(f"/api/jobs/{jobs[0]['id']}/reorder", json={"fromOrder": 2, "toOrder": 0})

        assert response.status_code == 409
        assert board_orders(client) == [("A", 0), ("B", 1), ("C", 2)]

    def test_negative_order_rejected(self, client, make_jobs):
        jobs = make_jobs("A")

        response = client.patch(f"/api/jobs/{jobs[0]['id']}/reorder", json={"fromOrder": 0, "toOrder": -1})

        assert response.status_code == 422

    def test_reorder_nonexistent_job(self, client):
        response = client.patch("/api/jobs/99999/reorder", json={"fromOrder": 0, "toOrder": 1})
        assert response.status_code == 404

    def test_injected_failure_leaves_order_untouched(self, client, make_jobs, inject_faults):
        jobs = make_jobs("A", "B", "C")
        inject_faults(reorder=1.0)

        response = client.patch(f"/api/jobs/{jobs[0]['id']}/reorder", json={"fromOrder": 0, "toOrder": 2})

        assert response.status_code == 500
        assert "reorder" in response.json()["detail"].lower()
        assert board_orders(client) == [("A", 0), ("B", 1), ("C", 2)]

    def test_database_failure_rolls_back_every_shift(self, client, db_session, make_jobs, monkeypatch):
        jobs = make_jobs("A", "B", "C")

        def broken_commit():
            raise RuntimeError("disk full")

        monkeypatch.setattr(db_session, "commit", broken_commit)
        response = client.patch(f"/api/jobs/{jobs[0]['id']}/reorder", json={"fromOrder": 0, "toOrder": 2})
        monkeypatch.undo()

        assert response.status_code == 500
        assert board_orders(client) == [("A", 0), ("B", 1), ("C", 2)]


class TestJobDeletion:
    """Tests for job deletion"""

    def test_delete_job(self, client, sample_job_data):
        """Test deleting a job"""
        job_id = client.post("/api/jobs", json=sample_job_data).json()["id"]

        response = client.delete(f"/api/jobs/{job_id}")
        assert response.status_code == 200
        assert response.json()["success"] is True

        get_response = client.get(f"/api/jobs/{job_id}")
        assert get_response.status_code == 404

    def test_delete_nonexistent_job(self, client):
        """Test deleting a job that doesn't exist"""
        response = client.delete("/api/jobs/99999")
        assert response.status_code == 404

    def test_delete_keeps_candidates(self, client, sample_job_data, make_candidate):
        job_id = client.post("/api/jobs", json=sample_job_data).json()["id"]
        candidate = make_candidate(jobId=job_id)

        client.delete(f"/api/jobs/{job_id}")

        response = client.get(f"/api/candidates/{candidate['id']}")
        assert response.status_code == 200
        assert response.json()["jobId"] == job_id

    def test_injected_write_failure(self, client, sample_job_data, inject_faults):
        job_id = client.post("/api/jobs", json=sample_job_data).json()["id"]
        inject_faults(write=1.0)

        response = client.delete(f"/api/jobs/{job_id}")

        assert response.status_code == 500
        assert client.get(f"/api/jobs/{job_id}").status_code == 200
