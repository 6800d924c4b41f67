"""
Portfolio Backend: Persistence Gateway Tests
==============================================

What:  PersistenceGateway against a real (SQLite) database, plus the pure
       action_label() rule.

What we test:
    ✅ action_label: GitHub URLs → "Show Code", everything else → "Show Website"
    ✅ Empty tables give empty lists, never None
    ✅ An inserted review is visible to the next list_reviews call
    ✅ Projects carry their derived label
    ✅ Missing tables / timeouts surface as StorageError
"""

import asyncio

import pytest
from sqlalchemy import insert

from portfolio_api.exceptions import StorageError
from portfolio_api.models.project import Project
from portfolio_api.schemas.review import ReviewSubmission
from portfolio_api.services.gateway import PersistenceGateway, action_label


class TestActionLabel:

    def test_github_url_shows_code(self):
        assert action_label("https://github.com/me/thing") == "Show Code"

    def test_other_url_shows_website(self):
        assert action_label("https://thing.example.com") == "Show Website"

    def test_substring_match_anywhere(self):
        assert action_label("http://gist.github.com/abc") == "Show Code"

    def test_empty_url_shows_website(self):
        assert action_label("") == "Show Website"


class TestReviews:

    @pytest.mark.asyncio
    async def test_empty_table_returns_empty_list(self, sqlite_gateway):
        reviews = await sqlite_gateway.list_reviews()
        assert reviews == []

    @pytest.mark.asyncio
    async def test_insert_then_list_reads_back(self, sqlite_gateway):
        await sqlite_gateway.insert_review(
            ReviewSubmission(company="Acme", name="Grace", review="Great work", key="x")
        )

        reviews = await sqlite_gateway.list_reviews()

        assert len(reviews) == 1
        assert reviews[0].company == "Acme"
        assert reviews[0].name == "Grace"
        assert reviews[0].review == "Great work"
        assert reviews[0].id >= 1

    @pytest.mark.asyncio
    async def test_reviews_listed_in_insertion_order(self, sqlite_gateway):
        for name in ("first", "second", "third"):
            await sqlite_gateway.insert_review(
                ReviewSubmission(company="Co", name=name, review="ok")
            )

        reviews = await sqlite_gateway.list_reviews()

        assert [r.name for r in reviews] == ["first", "second", "third"]
        assert len({r.id for r in reviews}) == 3


class TestProjects:

    @pytest.mark.asyncio
    async def test_projects_carry_action_label(self, sqlite_engine, sqlite_gateway):
        async with sqlite_engine.begin() as conn:
            await conn.execute(
                insert(Project),
                [
                    {"title": "Lib", "description": "A library", "url": "https://github.com/me/lib"},
                    {"title": "Site", "description": "A site", "url": "https://me.example.com"},
                ],
            )

        projects = await sqlite_gateway.list_projects()

        assert [p.action_label for p in projects] == ["Show Code", "Show Website"]
        assert projects[0].model_dump(by_alias=True)["actionLabel"] == "Show Code"

    @pytest.mark.asyncio
    async def test_empty_projects_table(self, sqlite_gateway):
        assert await sqlite_gateway.list_projects() == []


class TestStorageFailures:

    @pytest.mark.asyncio
    async def test_missing_table_raises_storage_error(self, sqlite_engine):
        gateway = PersistenceGateway(sqlite_engine)

        with pytest.raises(StorageError) as exc_info:
            await gateway.list_reviews()

        assert exc_info.value.context["operation"] == "list_reviews"

    @pytest.mark.asyncio
    async def test_failed_insert_raises_storage_error(self, sqlite_engine):
        gateway = PersistenceGateway(sqlite_engine)

        with pytest.raises(StorageError):
            await gateway.insert_review(
                ReviewSubmission(company="Acme", name="Grace", review="text")
            )

    @pytest.mark.asyncio
    async def test_slow_operation_times_out(self, sqlite_engine):
        gateway = PersistenceGateway(sqlite_engine, query_timeout=0.05)

        async def slow(session):
            await asyncio.sleep(1)

        with pytest.raises(StorageError) as exc_info:
            await gateway._run("slow_query", slow)

        assert exc_info.value.context["reason"] == "timeout"

    @pytest.mark.asyncio
    async def test_ping_succeeds_on_reachable_store(self, sqlite_gateway):
        await sqlite_gateway.ping()
