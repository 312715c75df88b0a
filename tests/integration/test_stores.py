"""Integration tests for the SQLAlchemy stores against SQLite."""

from __future__ import annotations

import uuid

import pytest

from fulcrum.database.models import ProgressState


@pytest.mark.asyncio
async def test_review_create_and_get(review_store, make_application) -> None:
    application = await make_application()

    review = await review_store.create(1, application.id)
    loaded = await review_store.get_by_id(review.id)

    assert loaded is not None
    assert loaded.stage_id == 1
    assert loaded.application_id == application.id
    assert loaded.reviewer_email is None
    assert loaded.fields == {}


@pytest.mark.asyncio
async def test_review_get_missing(review_store) -> None:
    assert await review_store.get_by_id(uuid.uuid4()) is None


@pytest.mark.asyncio
async def test_review_save_persists_fields_and_reviewer(review_store, make_application) -> None:
    application = await make_application()
    review = await review_store.create(1, application.id)

    review.reviewer_email = "a@x.org"
    review.fields = {"score": 4}
    await review_store.save(review)

    loaded = await review_store.get_by_id(review.id)
    assert loaded.reviewer_email == "a@x.org"
    assert loaded.fields == {"score": 4}


@pytest.mark.asyncio
async def test_review_counts_are_per_stage(review_store, make_application) -> None:
    application = await make_application()
    for stage_id in (1, 1, 2):
        review = await review_store.create(stage_id, application.id)
        review.reviewer_email = "a@x.org"
        await review_store.save(review)

    assert await review_store.count_by_reviewer_and_stage("a@x.org", 1) == 2
    assert await review_store.count_by_reviewer_and_stage("a@x.org", 2) == 1
    assert await review_store.count_by_reviewer_and_stage("b@x.org", 1) == 0


@pytest.mark.asyncio
async def test_review_find_one_and_listings(review_store, make_application) -> None:
    first_app = await make_application()
    second_app = await make_application()

    older = await review_store.create(1, first_app.id)
    older.reviewer_email = "a@x.org"
    await review_store.save(older)
    newer = await review_store.create(2, second_app.id)
    newer.reviewer_email = "a@x.org"
    await review_store.save(newer)
    await review_store.create(1, first_app.id)

    found = await review_store.find_one(reviewer_email="a@x.org", application_id=first_app.id)
    assert found.id == older.id
    assert await review_store.find_one(reviewer_email="b@x.org") is None

    assert [r.id for r in await review_store.find_by_reviewer("a@x.org")] == [older.id, newer.id]
    assert len(await review_store.find_by_stage_and_application(1, first_app.id)) == 2
    assert len(await review_store.find_by_application(second_app.id)) == 1


@pytest.mark.asyncio
async def test_application_lookup_by_email_and_year(application_store, make_application) -> None:
    application = await make_application(email="ada@example.com", year_applied=2024)

    found = await application_store.find_by_email_and_year("ada@example.com", 2024)

    assert found.id == application.id
    assert await application_store.find_by_email_and_year("ada@example.com", 2025) is None
    assert found.blocklisted_reviewer_emails == []


@pytest.mark.asyncio
async def test_blocklist_appends_once(application_store, make_application) -> None:
    application = await make_application()

    await application_store.add_blocklisted_reviewer(application.id, "a@x.org")
    await application_store.add_blocklisted_reviewer(application.id, "a@x.org")
    await application_store.add_blocklisted_reviewer(application.id, "b@x.org")

    loaded = await application_store.get_by_id(application.id)
    assert loaded.blocklisted_reviewer_emails == ["a@x.org", "b@x.org"]


@pytest.mark.asyncio
async def test_blocklist_missing_application(application_store) -> None:
    assert await application_store.add_blocklisted_reviewer(uuid.uuid4(), "a@x.org") is None


@pytest.mark.asyncio
async def test_progress_create_and_save(progress_store, make_application) -> None:
    application = await make_application()

    progress = await progress_store.create(application.id, "engineering")
    assert progress.stage_index == -1
    assert progress.state is ProgressState.pending

    progress.stage_index = 2
    progress.state = ProgressState.accepted
    await progress_store.save(progress)

    loaded = await progress_store.get_by_pipeline_and_application("engineering", application.id)
    assert loaded.id == progress.id
    assert loaded.stage_index == 2
    assert loaded.state is ProgressState.accepted
    assert await progress_store.get_by_pipeline_and_application("design", application.id) is None
    assert [p.id for p in await progress_store.find_by_application(application.id)] == [
        progress.id
    ]


@pytest.mark.asyncio
async def test_reviewer_directory_filters(reviewer_directory, make_reviewer) -> None:
    await make_reviewer("c@x.org", stage_ids=[1, 2])
    await make_reviewer("a@x.org", stage_ids=[1])
    await make_reviewer("b@x.org", stage_ids=[2])
    await make_reviewer("z@x.org", stage_ids=[1], active=False)

    assert [r.email for r in await reviewer_directory.get_by_stage(1)] == ["a@x.org", "c@x.org"]
    assert [r.email for r in await reviewer_directory.get_by_stage(3)] == []
    assert (await reviewer_directory.get_by_email("b@x.org")).assigned_stage_ids == [2]
    assert await reviewer_directory.get_by_email("z@x.org") is None
