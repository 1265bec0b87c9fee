"""Async client for Nextcloud files (WebDAV), calendars (CalDAV) and contacts (CardDAV)."""

from __future__ import annotations

import logging
import xml.etree.ElementTree as ET
from typing import Any
from urllib.parse import quote, unquote, urlsplit

import httpx

from .errors import NotFoundError, TransportError
from .models import ContactRecord, EventRecord, FileEntry, ShareLink
from .records import (
    EVENT_UID_DOMAIN,
    decode_contact,
    decode_contacts,
    decode_events,
    encode_contact,
    encode_event,
    generate_uid,
    time_range,
)

logger = logging.getLogger(__name__)

DAV = "{DAV:}"

SHARES_PATH = "/ocs/v2.php/apps/files_sharing/api/v1/shares"
PUBLIC_LINK_SHARE = "3"

PROPFIND_BODY = """<?xml version="1.0" encoding="utf-8" ?>
<d:propfind xmlns:d="DAV:">
  <d:prop>
    <d:getlastmodified/>
    <d:getcontentlength/>
    <d:getcontenttype/>
    <d:getetag/>
    <d:resourcetype/>
  </d:prop>
</d:propfind>"""

CALENDAR_QUERY_BODY = """<?xml version="1.0" encoding="utf-8" ?>
<c:calendar-query xmlns:d="DAV:" xmlns:c="urn:ietf:params:xml:ns:caldav">
  <d:prop>
    <d:getetag/>
    <c:calendar-data/>
  </d:prop>
  <c:filter>
    <c:comp-filter name="VCALENDAR">
      <c:comp-filter name="VEVENT">
        <c:time-range start="{start}" end="{end}"/>
      </c:comp-filter>
    </c:comp-filter>
  </c:filter>
</c:calendar-query>"""

ADDRESSBOOK_QUERY_BODY = """<?xml version="1.0" encoding="utf-8" ?>
<c:addressbook-query xmlns:d="DAV:" xmlns:c="urn:ietf:params:xml:ns:carddav">
  <d:prop>
    <d:getetag/>
    <c:address-data/>
  </d:prop>
</c:addressbook-query>"""

XML_HEADERS = {"Content-Type": "application/xml; charset=utf-8", "Depth": "1"}


def _normalize_path(path: str) -> str:
    return "/" + path.strip("/")


def _quote_path(path: str) -> str:
    return quote(_normalize_path(path))


class NextcloudClient:
    """One authenticated channel to a Nextcloud instance.

    Every request carries the same Basic credentials. Non-success responses
    raise ``NotFoundError`` (404) or ``TransportError``; nothing is retried.
    """

    def __init__(
        self,
        *,
        base_url: str,
        username: str,
        password: str,
        timeout_seconds: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._username = username
        options: dict[str, Any] = {}
        if timeout_seconds is not None:
            options["timeout"] = httpx.Timeout(timeout_seconds)
        self._client = httpx.AsyncClient(
            base_url=base_url.rstrip("/"),
            auth=httpx.BasicAuth(username, password),
            transport=transport,
            **options,
        )

    async def aclose(self) -> None:
        await self._client.aclose()

    @property
    def files_root(self) -> str:
        return f"/remote.php/dav/files/{quote(self._username)}"

    def calendar_path(self, calendar_id: str) -> str:
        return f"/remote.php/dav/calendars/{quote(self._username)}/{quote(calendar_id, safe='')}/"

    def address_book_path(self, address_book_id: str) -> str:
        return (
            f"/remote.php/dav/addressbooks/users/{quote(self._username)}/"
            f"{quote(address_book_id, safe='')}/"
        )

    async def _request(
        self,
        method: str,
        path: str,
        *,
        content: str | bytes | None = None,
        data: dict[str, str] | None = None,
        headers: dict[str, str] | None = None,
    ) -> httpx.Response:
        logger.debug("%s %s", method, path)
        try:
            resp = await self._client.request(
                method, path, content=content, data=data, headers=headers
            )
        except httpx.RequestError as exc:
            raise TransportError(
                status_code=None,
                method=method,
                url=path,
                reason=str(exc) or type(exc).__name__,
            ) from exc

        if resp.status_code >= 400:
            error_cls = NotFoundError if resp.status_code == 404 else TransportError
            raise error_cls(
                status_code=resp.status_code,
                method=method,
                url=str(resp.request.url),
                reason=resp.reason_phrase or (resp.text or "").strip(),
            )
        return resp

    # Files

    async def list_entries(self, path: str = "/") -> list[FileEntry]:
        """List the direct children of a directory."""
        resp = await self._request(
            "PROPFIND",
            self.files_root + _quote_path(path),
            content=PROPFIND_BODY,
            headers=XML_HEADERS,
        )
        try:
            root = ET.fromstring(resp.content)
        except ET.ParseError as exc:
            raise TransportError(
                status_code=resp.status_code,
                method="PROPFIND",
                url=str(resp.request.url),
                reason=f"Malformed multistatus response: {exc}",
            ) from exc

        requested = _normalize_path(path)
        entries = []
        for response in root.iter(f"{DAV}response"):
            entry = self._file_entry(response)
            if entry is not None and entry.filename != requested:
                entries.append(entry)
        return entries

    def _file_entry(self, response: ET.Element) -> FileEntry | None:
        href = response.findtext(f"{DAV}href")
        if not href:
            return None
        decoded = unquote(urlsplit(href).path)
        marker = unquote(self.files_root)
        idx = decoded.find(marker)
        filename = _normalize_path(decoded[idx + len(marker) :] if idx >= 0 else decoded)

        props: dict[str, ET.Element] = {}
        for propstat in response.findall(f"{DAV}propstat"):
            status = propstat.findtext(f"{DAV}status") or ""
            prop = propstat.find(f"{DAV}prop")
            if prop is None or " 200 " not in f"{status} ":
                continue
            for child in prop:
                props[child.tag.removeprefix(DAV)] = child

        resourcetype = props.get("resourcetype")
        is_dir = resourcetype is not None and resourcetype.find(f"{DAV}collection") is not None

        def text(name: str) -> str | None:
            element = props.get(name)
            return element.text.strip() if element is not None and element.text else None

        length = text("getcontentlength")
        etag = text("getetag")
        return FileEntry(
            filename=filename,
            basename=filename.rsplit("/", 1)[-1],
            type="directory" if is_dir else "file",
            size=int(length) if length and length.isdigit() else 0,
            lastmod=text("getlastmodified"),
            etag=etag.replace('"', "") if etag else None,
            mime=None if is_dir else text("getcontenttype"),
        )

    async def read_entry(self, path: str) -> str:
        resp = await self._request("GET", self.files_root + _quote_path(path))
        return resp.text

    async def write_entry(self, path: str, content: str) -> None:
        await self._request(
            "PUT", self.files_root + _quote_path(path), content=content.encode("utf-8")
        )

    async def remove_entry(self, path: str) -> None:
        await self._request("DELETE", self.files_root + _quote_path(path))

    async def create_share(
        self,
        path: str,
        *,
        password: str | None = None,
        expire_date: str | None = None,
    ) -> ShareLink:
        """Create a public link share through the OCS share API."""
        form = {"path": path, "shareType": PUBLIC_LINK_SHARE}
        if password:
            form["password"] = password
        if expire_date:
            form["expireDate"] = expire_date

        resp = await self._request(
            "POST",
            SHARES_PATH,
            data=form,
            headers={"OCS-APIRequest": "true", "Accept": "application/json"},
        )
        try:
            payload = resp.json()
        except ValueError as exc:
            raise TransportError(
                status_code=resp.status_code,
                method="POST",
                url=str(resp.request.url),
                reason="Share response is not JSON",
            ) from exc

        ocs = payload.get("ocs") if isinstance(payload, dict) else None
        if not isinstance(ocs, dict):
            raise TransportError(
                status_code=resp.status_code,
                method="POST",
                url=str(resp.request.url),
                reason=f"Unexpected share response: {type(payload).__name__}",
            )

        # OCS can report a failure inside a 200 response.
        meta = ocs.get("meta") or {}
        status_code = meta.get("statuscode")
        if isinstance(status_code, int) and status_code not in (100, 200):
            raise TransportError(
                status_code=status_code,
                method="POST",
                url=str(resp.request.url),
                reason=meta.get("message") or meta.get("status") or "Share rejected",
            )

        share = ocs.get("data") or {}
        return ShareLink(
            id=str(share.get("id", "")),
            url=share.get("url") or "",
            token=share.get("token") or "",
            path=share.get("path") or path,
            expiration=share.get("expiration") or expire_date,
            password=bool(share.get("password") or password),
        )

    # Calendar

    async def list_events(
        self,
        calendar_id: str = "personal",
        start_date: str | None = None,
        end_date: str | None = None,
    ) -> list[EventRecord]:
        start, end = time_range(start_date, end_date)
        resp = await self._request(
            "REPORT",
            self.calendar_path(calendar_id),
            content=CALENDAR_QUERY_BODY.format(start=start, end=end),
            headers=XML_HEADERS,
        )
        return decode_events(resp.text)

    async def create_event(
        self,
        calendar_id: str,
        *,
        summary: str,
        start: str,
        end: str,
        description: str | None = None,
        location: str | None = None,
    ) -> str:
        """Write a new event resource and return its UID."""
        uid = generate_uid(EVENT_UID_DOMAIN)
        body = encode_event(
            uid,
            summary=summary,
            start=start,
            end=end,
            description=description,
            location=location,
        )
        await self._request(
            "PUT",
            self.calendar_path(calendar_id) + quote(f"{uid}.ics", safe="@"),
            content=body.encode("utf-8"),
            headers={"Content-Type": "text/calendar; charset=utf-8"},
        )
        return uid

    async def delete_event(self, calendar_id: str, event_id: str) -> None:
        await self._request(
            "DELETE", self.calendar_path(calendar_id) + quote(f"{event_id}.ics", safe="@")
        )

    # Contacts

    async def list_contacts(self, address_book_id: str = "contacts") -> list[ContactRecord]:
        resp = await self._request(
            "REPORT",
            self.address_book_path(address_book_id),
            content=ADDRESSBOOK_QUERY_BODY,
            headers=XML_HEADERS,
        )
        return decode_contacts(resp.text)

    async def get_contact(self, address_book_id: str, contact_id: str) -> ContactRecord:
        """Fetch one vCard; a card without a UID line takes ``contact_id`` as its UID."""
        path = self.address_book_path(address_book_id) + quote(f"{contact_id}.vcf", safe="@")
        resp = await self._request("GET", path)
        contact = decode_contact(resp.text, fallback_uid=contact_id)
        if contact is None:
            raise NotFoundError(
                status_code=404, method="GET", url=str(resp.request.url), reason="Empty contact id"
            )
        return contact

    async def create_contact(
        self,
        address_book_id: str,
        *,
        full_name: str,
        email: str | None = None,
        phone: str | None = None,
        organization: str | None = None,
        note: str | None = None,
    ) -> str:
        """Write a new vCard and return its UID."""
        uid = generate_uid()
        body = encode_contact(
            uid,
            full_name=full_name,
            email=email,
            phone=phone,
            organization=organization,
            note=note,
        )
        await self._request(
            "PUT",
            self.address_book_path(address_book_id) + quote(f"{uid}.vcf", safe="@"),
            content=body.encode("utf-8"),
            headers={"Content-Type": "text/vcard; charset=utf-8"},
        )
        return uid
