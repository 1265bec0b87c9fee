"""Line-oriented iCalendar / vCard codec.

Outgoing records are rendered from ordered field tables: required lines are
always written, optional lines only when a value is present.

Incoming records are scraped, not parsed. Every ``calendar-data`` /
``address-data`` element of a REPORT response is unescaped and each field is
taken from the first line starting with its key (``KEY:`` or
``KEY;params:``). Folded lines and multi-valued fields are not handled, and a
block without a UID is dropped without an error.
"""

from __future__ import annotations

import re
import secrets
import time
from collections.abc import Mapping
from datetime import datetime, timezone

from .models import ContactRecord, EventRecord

CRLF = "\r\n"

EPOCH_START = "19700101T000000Z"
FAR_FUTURE = "20991231T235959Z"

EVENT_UID_DOMAIN = "mcp-nextcloud"
PRODID = "-//MCP Nextcloud//EN"

# (line key, value name, required)
EVENT_FIELDS: tuple[tuple[str, str, bool], ...] = (
    ("UID", "uid", True),
    ("DTSTAMP", "stamp", True),
    ("DTSTART", "start", True),
    ("DTEND", "end", True),
    ("SUMMARY", "summary", True),
    ("DESCRIPTION", "description", False),
    ("LOCATION", "location", False),
)

CONTACT_FIELDS: tuple[tuple[str, str, bool], ...] = (
    ("VERSION", "version", True),
    ("UID", "uid", True),
    ("FN", "full_name", True),
    ("N", "name", True),
    ("EMAIL", "email", False),
    ("TEL", "phone", False),
    ("ORG", "organization", False),
    ("NOTE", "note", False),
)

_CALENDAR_DATA = re.compile(
    r"<(?:[\w-]+:)?calendar-data\b[^>]*>(.*?)</(?:[\w-]+:)?calendar-data>",
    re.IGNORECASE | re.DOTALL,
)
_ADDRESS_DATA = re.compile(
    r"<(?:[\w-]+:)?address-data\b[^>]*>(.*?)</(?:[\w-]+:)?address-data>",
    re.IGNORECASE | re.DOTALL,
)


def generate_uid(domain: str | None = None) -> str:
    """Return ``<epoch-ms>-<random hex>`` with an optional ``@domain`` suffix."""
    uid = f"{time.time_ns() // 1_000_000}-{secrets.token_hex(6)}"
    return f"{uid}@{domain}" if domain else uid


def compact_timestamp(value: str) -> str:
    """``2024-01-15T10:00:00.000Z`` -> ``20240115T100000Z``."""
    return re.sub(r"\.\d+", "", re.sub(r"[-:]", "", value))


def time_range(start_date: str | None, end_date: str | None) -> tuple[str, str]:
    """Compact ``time-range`` bounds for whole days; open ends span 1970 to 2099."""
    start = compact_timestamp(f"{start_date}T00:00:00Z") if start_date else EPOCH_START
    end = compact_timestamp(f"{end_date}T23:59:59Z") if end_date else FAR_FUTURE
    return start, end


def structured_name(full_name: str) -> str:
    """Surname-first ``N`` value, e.g. ``Ada Lovelace`` -> ``Lovelace;Ada;;;``."""
    return ";".join(reversed(full_name.split())) + ";;;"


def _escape_text(value: str) -> str:
    return value.replace("\r\n", "\\n").replace("\n", "\\n")


def _emit(values: Mapping[str, str | None], table: tuple[tuple[str, str, bool], ...]) -> list[str]:
    lines: list[str] = []
    for key, name, required in table:
        value = values.get(name)
        if value or required:
            lines.append(f"{key}:{_escape_text(value or '')}")
    return lines


def encode_event(
    uid: str,
    *,
    summary: str,
    start: str,
    end: str,
    description: str | None = None,
    location: str | None = None,
    stamp: datetime | None = None,
) -> str:
    stamp = stamp or datetime.now(timezone.utc)
    values = {
        "uid": uid,
        "stamp": stamp.strftime("%Y%m%dT%H%M%SZ"),
        "start": compact_timestamp(start),
        "end": compact_timestamp(end),
        "summary": summary,
        "description": description,
        "location": location,
    }
    lines = [
        "BEGIN:VCALENDAR",
        "VERSION:2.0",
        f"PRODID:{PRODID}",
        "BEGIN:VEVENT",
        *_emit(values, EVENT_FIELDS),
        "END:VEVENT",
        "END:VCALENDAR",
    ]
    return CRLF.join(lines)


def encode_contact(
    uid: str,
    *,
    full_name: str,
    email: str | None = None,
    phone: str | None = None,
    organization: str | None = None,
    note: str | None = None,
) -> str:
    values = {
        "version": "3.0",
        "uid": uid,
        "full_name": full_name,
        "name": structured_name(full_name),
        "email": email,
        "phone": phone,
        "organization": organization,
        "note": note,
    }
    return CRLF.join(["BEGIN:VCARD", *_emit(values, CONTACT_FIELDS), "END:VCARD"])


def unescape_xml(text: str) -> str:
    # &amp; last, so "&amp;lt;" stays "&lt;".
    return text.replace("&lt;", "<").replace("&gt;", ">").replace("&amp;", "&")


def extract_field(text: str, key: str) -> str | None:
    """Value of the first ``KEY[;params]:value`` line, trimmed; ``None`` if absent or empty."""
    match = re.search(rf"^{re.escape(key)}(?:;[^:\r\n]*)?:(.*)$", text, re.MULTILINE)
    if match is None:
        return None
    return match.group(1).strip() or None


def decode_event(block: str) -> EventRecord | None:
    uid = extract_field(block, "UID")
    if uid is None:
        return None
    return EventRecord(
        uid=uid,
        summary=extract_field(block, "SUMMARY") or "",
        description=extract_field(block, "DESCRIPTION"),
        start=extract_field(block, "DTSTART") or "",
        end=extract_field(block, "DTEND") or "",
        location=extract_field(block, "LOCATION"),
        raw=block,
    )


def decode_contact(block: str, *, fallback_uid: str | None = None) -> ContactRecord | None:
    uid = extract_field(block, "UID") or fallback_uid
    if not uid:
        return None
    return ContactRecord(
        uid=uid,
        full_name=extract_field(block, "FN") or "",
        email=extract_field(block, "EMAIL"),
        phone=extract_field(block, "TEL"),
        organization=extract_field(block, "ORG"),
        note=extract_field(block, "NOTE"),
        raw=block,
    )


def decode_events(xml: str) -> list[EventRecord]:
    """Decode every event in a calendar-query REPORT response."""
    events = []
    for match in _CALENDAR_DATA.finditer(xml):
        event = decode_event(unescape_xml(match.group(1)))
        if event is not None:
            events.append(event)
    return events


def decode_contacts(xml: str) -> list[ContactRecord]:
    """Decode every contact in an addressbook-query REPORT response."""
    contacts = []
    for match in _ADDRESS_DATA.finditer(xml):
        contact = decode_contact(unescape_xml(match.group(1)))
        if contact is not None:
            contacts.append(contact)
    return contacts
