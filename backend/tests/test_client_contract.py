"""
VisitorBook: Client/Server Contract Tests
===========================================

What we test:
    ✅ The terminal client's ApiClient parses every real endpoint response
    ✅ Server validation messages reach the client unchanged
    ✅ A full page submit against the real app: count and list agree

How: the frontend ApiClient talks to the FastAPI app in-process through
httpx.ASGITransport, backed by the per-test SQLite store.
"""

import pytest
import pytest_asyncio
from httpx import ASGITransport

from visitorbook.api.client import ApiClient
from visitorbook.app import VisitorBookApp
from visitorbook.exceptions import TransportError
from visitorbook.schemas import MessageFormData


@pytest_asyncio.fixture
async def api_client(database, test_settings):
    from app.main import create_app

    app = create_app(settings=test_settings, database=database)
    async with ApiClient("http://test", transport=ASGITransport(app=app)) as client:
        yield client


class TestClientContract:

    @pytest.mark.asyncio
    async def test_visitor_endpoints(self, api_client):
        assert (await api_client.get_visitor_count()).count == 0
        assert (await api_client.increment_visitor_count()).count == 1
        assert (await api_client.get_visitor_count()).count == 1

    @pytest.mark.asyncio
    async def test_message_endpoints(self, api_client):
        first = await api_client.create_message(MessageFormData(name="M1", content="one"))
        second = await api_client.create_message(MessageFormData(name="M2", content="two"))

        listed = await api_client.list_messages()

        assert [m.id for m in listed] == [second.id, first.id]

    @pytest.mark.asyncio
    async def test_validation_message_reaches_client(self, api_client):
        with pytest.raises(TransportError) as exc_info:
            await api_client.create_message(MessageFormData(name="", content="x"))

        assert exc_info.value.status_code == 400
        assert exc_info.value.message == "Name and content are required"

    @pytest.mark.asyncio
    async def test_page_submit_round_trip(self, api_client):
        page = VisitorBookApp(api_client)
        await page.load()

        page.form.name = "Alice"
        page.form.content = "Hi"
        assert await page.form.submit() is True

        fresh = VisitorBookApp(api_client)
        await fresh.load()

        assert fresh.badge.count == page.badge.count == 1
        assert [m.id for m in fresh.message_list.messages] == [m.id for m in page.message_list.messages]
