"""Integration tests for job posting, search and apply endpoints."""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

import pytest
from httpx import AsyncClient

from tests.factories import JobFactory, UserFactory

AuthHeaders = Callable[[str], dict[str, str]]


def build_job_payload(**overrides: Any) -> dict[str, Any]:
    """Build a complete posting form as the client submits it."""
    payload: dict[str, Any] = {
        "title": "Backend Engineer",
        "description": "Build APIs",
        "company": "Acme",
        "location": "Brisbane",
        "type": "Full-time",
        "category": "Engineering",
        "salary": "95000",
        "deadline": "2030-01-31",
        "skills": "Python, SQL",
        "remote": False,
    }
    payload.update(overrides)
    return payload


class TestJobSearchAPI:
    @pytest.mark.asyncio
    async def test_list_jobs_empty(self, client: AsyncClient) -> None:
        response = await client.get("/api/v1/jobs")

        assert response.status_code == 200
        assert response.json() == []

    @pytest.mark.asyncio
    async def test_unknown_experience_bucket_is_rejected(
        self, client: AsyncClient
    ) -> None:
        response = await client.get("/api/v1/jobs", params={"experience": "junior"})

        assert response.status_code == 422
        body = response.json()
        assert body["kind"] == "validation"
        assert body["errors"][0]["loc"] == ["query", "experience"]

    @pytest.mark.asyncio
    async def test_search_uses_camel_case_query_parameters(
        self, client: AsyncClient, job_factory: JobFactory
    ) -> None:
        await job_factory.create(title="Junior Developer", salary=55000)
        wanted = await job_factory.create(
            title="Senior Developer", salary=120000, job_type="Contract", remote=True
        )

        response = await client.get(
            "/api/v1/jobs",
            params={
                "search": "developer",
                "type": "Contract",
                "salaryMin": "100000",
                "remoteOnly": "true",
            },
        )

        assert response.status_code == 200
        body = response.json()
        assert [job["id"] for job in body] == [wanted.id]
        assert body[0]["type"] == "Contract"
        assert body[0]["ownerId"] == "employer-1"

    @pytest.mark.asyncio
    async def test_facets(self, client: AsyncClient, job_factory: JobFactory) -> None:
        await job_factory.create(location="Perth", skills="Go")
        await job_factory.create(location="Hobart", skills="Go, Rust")

        response = await client.get("/api/v1/jobs/facets")

        assert response.status_code == 200
        assert response.json() == {
            "locations": ["Hobart", "Perth"],
            "skills": ["Go", "Rust"],
        }

    @pytest.mark.asyncio
    async def test_get_missing_job_returns_404_and_reports(
        self, app: Any, client: AsyncClient
    ) -> None:
        response = await client.get("/api/v1/jobs/9999")

        assert response.status_code == 404
        assert response.json()["kind"] == "api"
        record = app.state.error_hub.history[0]
        assert record.status == 404
        assert record.message == "The requested resource was not found."


class TestJobPostingAPI:
    @pytest.mark.asyncio
    async def test_employer_creates_job(
        self, client: AsyncClient, user_factory: UserFactory, bearer: AuthHeaders
    ) -> None:
        await user_factory.create(uid="employer-1", user_type="employer")

        response = await client.post(
            "/api/v1/jobs", json=build_job_payload(), headers=bearer("employer-1")
        )

        assert response.status_code == 201
        body = response.json()
        assert body["title"] == "Backend Engineer"
        assert body["salary"] == 95000
        assert body["deadline"] == "2030-01-31"
        assert body["ownerId"] == "employer-1"
        assert body["status"] == "active"

    @pytest.mark.asyncio
    async def test_incomplete_form_returns_field_errors(
        self, client: AsyncClient, user_factory: UserFactory, bearer: AuthHeaders
    ) -> None:
        await user_factory.create(uid="employer-1", user_type="employer")

        response = await client.post(
            "/api/v1/jobs",
            json=build_job_payload(title="", salary="a lot"),
            headers=bearer("employer-1"),
        )

        assert response.status_code == 422
        body = response.json()
        assert body["kind"] == "form"
        assert body["errors"] == {
            "title": "Title is required",
            "salary": "Salary must be a valid number",
        }

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        ("salary", "message"),
        [
            ("²", "Salary must be a valid number"),
            ("99999999999", "Salary is too large"),
        ],
    )
    async def test_unstorable_salary_is_a_form_error(
        self,
        client: AsyncClient,
        user_factory: UserFactory,
        bearer: AuthHeaders,
        salary: str,
        message: str,
    ) -> None:
        await user_factory.create(uid="employer-1", user_type="employer")

        response = await client.post(
            "/api/v1/jobs",
            json=build_job_payload(salary=salary),
            headers=bearer("employer-1"),
        )

        assert response.status_code == 422
        assert response.json()["errors"] == {"salary": message}

    @pytest.mark.asyncio
    async def test_job_seeker_cannot_post(
        self, client: AsyncClient, user_factory: UserFactory, bearer: AuthHeaders
    ) -> None:
        await user_factory.create(uid="seeker-1")

        response = await client.post(
            "/api/v1/jobs", json=build_job_payload(), headers=bearer("seeker-1")
        )

        assert response.status_code == 403
        assert response.headers["X-Redirect-To"] == "/unauthorized"

    @pytest.mark.asyncio
    async def test_only_owner_can_edit(
        self,
        client: AsyncClient,
        user_factory: UserFactory,
        job_factory: JobFactory,
        bearer: AuthHeaders,
    ) -> None:
        await user_factory.create(uid="employer-1", user_type="employer")
        await user_factory.create(uid="employer-2", user_type="employer")
        job = await job_factory.create(owner_id="employer-1")

        denied = await client.patch(
            f"/api/v1/jobs/{job.id}",
            json={"title": "Hijacked"},
            headers=bearer("employer-2"),
        )
        allowed = await client.patch(
            f"/api/v1/jobs/{job.id}",
            json={"title": "Renamed", "remote": True},
            headers=bearer("employer-1"),
        )

        assert denied.status_code == 403
        assert allowed.status_code == 200
        assert allowed.json()["title"] == "Renamed"
        assert allowed.json()["remote"] is True

    @pytest.mark.asyncio
    async def test_owner_deletes_job_and_lists_own_jobs(
        self,
        client: AsyncClient,
        user_factory: UserFactory,
        job_factory: JobFactory,
        bearer: AuthHeaders,
    ) -> None:
        await user_factory.create(uid="employer-1", user_type="employer")
        keep = await job_factory.create(owner_id="employer-1")
        drop = await job_factory.create(owner_id="employer-1")
        await job_factory.create(owner_id="employer-2")

        deleted = await client.delete(
            f"/api/v1/jobs/{drop.id}", headers=bearer("employer-1")
        )
        mine = await client.get("/api/v1/jobs/mine", headers=bearer("employer-1"))

        assert deleted.status_code == 204
        assert [job["id"] for job in mine.json()] == [keep.id]


class TestApplyAPI:
    @pytest.mark.asyncio
    async def test_apply_then_status_then_duplicate(
        self,
        client: AsyncClient,
        user_factory: UserFactory,
        job_factory: JobFactory,
        bearer: AuthHeaders,
    ) -> None:
        await user_factory.create(uid="seeker-1")
        job = await job_factory.create()
        headers = bearer("seeker-1")
        job_url = f"/api/v1/jobs/{job.id}"

        applied = await client.post(f"{job_url}/applications", headers=headers)
        status = await client.get(f"{job_url}/application-status", headers=headers)
        again = await client.post(f"{job_url}/applications", headers=headers)

        assert applied.status_code == 201
        assert applied.json()["status"] == "pending"
        assert status.json() == {
            "hasApplied": True,
            "applicationId": applied.json()["id"],
            "status": "pending",
        }
        assert again.status_code == 400
        assert again.json()["detail"] == "You have already applied for this job."
