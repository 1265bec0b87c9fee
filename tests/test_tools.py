from __future__ import annotations

import httpx
import pytest

from mcp_nextcloud.mcp_server import build_catalog

EXPECTED_TOOLS = [
    "nextcloud_list_files",
    "nextcloud_read_file",
    "nextcloud_upload_file",
    "nextcloud_delete",
    "nextcloud_create_share",
    "nextcloud_list_events",
    "nextcloud_create_event",
    "nextcloud_delete_event",
    "nextcloud_list_contacts",
    "nextcloud_get_contact",
    "nextcloud_create_contact",
]


def test_catalog_order_and_defaults(make_client) -> None:
    client, _ = make_client(lambda request: httpx.Response(200))
    catalog = build_catalog(client)

    tools = {t.name: t for t in catalog.list_tools()}
    assert [t.name for t in catalog.list_tools()] == EXPECTED_TOOLS
    assert [m.name for m in catalog.modules] == ["files", "calendar", "contacts"]

    assert tools["nextcloud_list_files"].inputSchema["properties"]["path"]["default"] == "/"
    assert tools["nextcloud_list_events"].inputSchema["properties"]["calendarId"]["default"] == "personal"
    assert tools["nextcloud_get_contact"].inputSchema["required"] == ["contactId"]
    assert set(tools["nextcloud_create_event"].inputSchema["required"]) == {"summary", "start", "end"}
    assert set(tools["nextcloud_delete_event"].inputSchema["required"]) == {"calendarId", "eventId"}


@pytest.mark.asyncio
async def test_share_tool(make_client) -> None:
    client, _ = make_client(
        lambda request: httpx.Response(
            200,
            json={"ocs": {"data": {"id": 42, "url": "https://host/s/abc", "token": "abc"}}},
        )
    )
    result = await build_catalog(client).call_tool(
        "nextcloud_create_share",
        {"path": "/docs/report.pdf", "password": "x", "expireDate": "2025-12-31"},
    )
    assert result.success is True
    assert result.data == {
        "id": "42",
        "url": "https://host/s/abc",
        "token": "abc",
        "path": "/docs/report.pdf",
        "expiration": "2025-12-31",
        "password": True,
    }


@pytest.mark.asyncio
async def test_share_tool_rejects_bad_date(make_client) -> None:
    client, handler = make_client(lambda request: httpx.Response(200, json={}))
    result = await build_catalog(client).call_tool(
        "nextcloud_create_share", {"path": "/docs", "expireDate": "31.12.2025"}
    )
    assert result.code == "validation_error"
    assert "expireDate" in (result.error or "")
    assert handler.requests == []


@pytest.mark.asyncio
async def test_list_files_defaults_to_root(make_client) -> None:
    client, handler = make_client(
        lambda request: httpx.Response(207, text='<d:multistatus xmlns:d="DAV:"/>')
    )
    result = await build_catalog(client).call_tool("nextcloud_list_files", {})
    assert result.success is True
    assert result.data == []
    assert handler.last.url.path == "/remote.php/dav/files/alice/"


@pytest.mark.asyncio
async def test_read_file_payload_and_not_found(make_client) -> None:
    client, _ = make_client(
        lambda request: httpx.Response(200, text="body")
        if request.url.path.endswith("/a.txt")
        else httpx.Response(404)
    )
    catalog = build_catalog(client)

    found = await catalog.call_tool("nextcloud_read_file", {"path": "/a.txt"})
    assert found.data == {"path": "/a.txt", "content": "body"}

    missing = await catalog.call_tool("nextcloud_read_file", {"path": "/b.txt"})
    assert missing.success is False
    assert missing.code == "not_found"


@pytest.mark.asyncio
async def test_upload_and_delete_messages(make_client) -> None:
    client, handler = make_client(lambda request: httpx.Response(204))
    catalog = build_catalog(client)

    uploaded = await catalog.call_tool("nextcloud_upload_file", {"path": "/a.txt", "content": "x"})
    deleted = await catalog.call_tool("nextcloud_delete", {"path": "/a.txt"})

    assert uploaded.data == {"path": "/a.txt", "message": "File uploaded successfully"}
    assert deleted.data == {"path": "/a.txt", "message": "Deleted successfully"}
    assert [r.method for r in handler.requests] == ["PUT", "DELETE"]


@pytest.mark.asyncio
async def test_upload_rejected_by_quota(make_client) -> None:
    client, _ = make_client(lambda request: httpx.Response(507))
    result = await build_catalog(client).call_tool(
        "nextcloud_upload_file", {"path": "/big.bin", "content": "x"}
    )
    assert result.success is False
    assert result.code == "transport_error"
    assert "Insufficient Storage" in (result.error or "")


@pytest.mark.asyncio
async def test_create_event_tool(make_client) -> None:
    client, handler = make_client(lambda request: httpx.Response(201))
    result = await build_catalog(client).call_tool(
        "nextcloud_create_event",
        {"summary": "Lunch", "start": "2024-03-01T12:00:00", "end": "2024-03-01T13:00:00"},
    )
    assert result.success is True
    assert result.data["message"] == "Event created successfully"
    assert handler.last.url.path.startswith("/remote.php/dav/calendars/alice/personal/")
    assert handler.last.url.path.endswith(f"{result.data['uid']}.ics")


@pytest.mark.asyncio
async def test_create_event_requires_iso_datetimes(make_client) -> None:
    client, handler = make_client(lambda request: httpx.Response(201))
    result = await build_catalog(client).call_tool(
        "nextcloud_create_event", {"summary": "Lunch", "start": "tomorrow", "end": "2024-03-01"}
    )
    assert result.code == "validation_error"
    assert {d["field"] for d in result.details or []} == {"start", "end"}
    assert handler.requests == []


@pytest.mark.asyncio
async def test_delete_event_tool(make_client) -> None:
    client, _ = make_client(lambda request: httpx.Response(204))
    result = await build_catalog(client).call_tool(
        "nextcloud_delete_event", {"calendarId": "personal", "eventId": "e1"}
    )
    assert result.data == {"eventId": "e1", "message": "Event deleted successfully"}


@pytest.mark.asyncio
async def test_create_contact_tool(make_client) -> None:
    client, handler = make_client(lambda request: httpx.Response(201))
    result = await build_catalog(client).call_tool(
        "nextcloud_create_contact", {"fullName": "Ada Lovelace", "email": "ada@example.org"}
    )
    assert result.success is True
    lines = handler.last.content.decode().split("\r\n")
    assert "FN:Ada Lovelace" in lines
    assert "N:Lovelace;Ada;;;" in lines
    assert "EMAIL:ada@example.org" in lines
    assert handler.last.url.path.startswith("/remote.php/dav/addressbooks/users/alice/contacts/")


@pytest.mark.asyncio
async def test_create_contact_rejects_bad_email(make_client) -> None:
    client, handler = make_client(lambda request: httpx.Response(201))
    result = await build_catalog(client).call_tool(
        "nextcloud_create_contact", {"fullName": "Ada", "email": "not-an-email"}
    )
    assert result.code == "validation_error"
    assert handler.requests == []


@pytest.mark.asyncio
async def test_get_contact_tool(make_client) -> None:
    client, _ = make_client(
        lambda request: httpx.Response(200, text="BEGIN:VCARD\r\nFN:Ada\r\nEND:VCARD")
    )
    result = await build_catalog(client).call_tool("nextcloud_get_contact", {"contactId": "ada-1"})
    assert result.success is True
    assert result.data["uid"] == "ada-1"
    assert result.data["fullName"] == "Ada"
    assert "email" not in result.data


@pytest.mark.asyncio
async def test_get_contact_requires_id(make_client) -> None:
    client, handler = make_client(lambda request: httpx.Response(200))
    result = await build_catalog(client).call_tool("nextcloud_get_contact", {})
    assert result.code == "validation_error"
    assert "contactId" in (result.error or "")
    assert handler.requests == []
