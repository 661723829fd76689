"""Integration tests for application review endpoints."""

from __future__ import annotations

from collections.abc import Callable

import pytest
from httpx import AsyncClient

from tests.factories import ApplicationFactory, JobFactory, UserFactory

AuthHeaders = Callable[[str], dict[str, str]]


@pytest.mark.asyncio
async def test_review_and_offer_flow(
    client: AsyncClient,
    user_factory: UserFactory,
    job_factory: JobFactory,
    application_factory: ApplicationFactory,
    bearer: AuthHeaders,
) -> None:
    employer = await user_factory.create(uid="employer-1", user_type="employer")
    applicant = await user_factory.create(uid="seeker-1")
    job = await job_factory.create(owner_id=employer.uid)
    application = await application_factory.create(job, applicant)
    url = f"/api/v1/applications/{application.id}"

    received = await client.get(
        "/api/v1/applications/received", headers=bearer("employer-1")
    )
    offered = await client.patch(
        f"{url}/status", json={"status": "offer sent"}, headers=bearer("employer-1")
    )
    answered = await client.post(
        f"{url}/offer-response",
        json={"response": "accepted"},
        headers=bearer("seeker-1"),
    )
    mine = await client.get("/api/v1/applications/mine", headers=bearer("seeker-1"))

    assert [item["id"] for item in received.json()] == [application.id]
    assert offered.json()["status"] == "offer sent"
    assert answered.status_code == 200
    assert answered.json()["status"] == "accepted"
    assert answered.json()["responseDate"] is not None
    assert mine.json()[0]["status"] == "accepted"


@pytest.mark.asyncio
async def test_details_forbidden_for_unrelated_user(
    client: AsyncClient,
    user_factory: UserFactory,
    job_factory: JobFactory,
    application_factory: ApplicationFactory,
    bearer: AuthHeaders,
) -> None:
    applicant = await user_factory.create(uid="seeker-1")
    await user_factory.create(uid="seeker-2")
    job = await job_factory.create()
    application = await application_factory.create(job, applicant)

    own = await client.get(
        f"/api/v1/applications/{application.id}", headers=bearer("seeker-1")
    )
    other = await client.get(
        f"/api/v1/applications/{application.id}", headers=bearer("seeker-2")
    )

    assert own.status_code == 200
    assert own.json()["job"]["id"] == job.id
    assert other.status_code == 403


@pytest.mark.asyncio
async def test_invalid_status_is_bad_request(
    client: AsyncClient,
    user_factory: UserFactory,
    job_factory: JobFactory,
    application_factory: ApplicationFactory,
    bearer: AuthHeaders,
) -> None:
    await user_factory.create(uid="employer-1", user_type="employer")
    applicant = await user_factory.create(uid="seeker-1")
    job = await job_factory.create()
    application = await application_factory.create(job, applicant)

    response = await client.patch(
        f"/api/v1/applications/{application.id}/status",
        json={"status": "hired"},
        headers=bearer("employer-1"),
    )

    assert response.status_code == 400
    assert "Invalid application status" in response.json()["detail"]
