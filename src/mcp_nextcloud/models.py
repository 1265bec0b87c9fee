"""Structured models returned by and accepted by MCP tools."""

from __future__ import annotations

import json
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

DATE_PATTERN = r"^\d{4}-\d{2}-\d{2}$"
DATETIME_PATTERN = r"^\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2}"
EMAIL_PATTERN = r"^[^@\s]+@[^@\s]+\.[^@\s]+$"


class CamelModel(BaseModel):
    """Snake_case in Python, camelCase on the wire."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class FileEntry(CamelModel):
    model_config = ConfigDict(frozen=True)

    filename: str
    basename: str
    type: Literal["file", "directory"]
    size: int = 0
    lastmod: str | None = None
    etag: str | None = None
    mime: str | None = None


class ShareLink(CamelModel):
    model_config = ConfigDict(frozen=True)

    id: str
    url: str
    token: str
    path: str
    expiration: str | None = None
    password: bool = False


class EventRecord(CamelModel):
    model_config = ConfigDict(frozen=True)

    uid: str
    summary: str = ""
    description: str | None = None
    start: str = ""
    end: str = ""
    location: str | None = None
    raw: str


class ContactRecord(CamelModel):
    model_config = ConfigDict(frozen=True)

    uid: str
    full_name: str = ""
    email: str | None = None
    phone: str | None = None
    organization: str | None = None
    note: str | None = None
    raw: str


class ToolResult(BaseModel):
    """Uniform envelope every tool call resolves to."""

    success: bool
    data: Any = None
    error: str | None = None
    code: str | None = None
    details: list[dict[str, Any]] | None = None

    @classmethod
    def ok(cls, data: Any) -> ToolResult:
        return cls(success=True, data=data)

    @classmethod
    def fail(
        cls,
        error: str,
        *,
        code: str,
        details: list[dict[str, Any]] | None = None,
    ) -> ToolResult:
        return cls(success=False, error=error, code=code, details=details)

    def to_text(self) -> str:
        return json.dumps(self.model_dump(exclude_none=True), indent=2, default=str)


# Tool arguments


class ListFilesArgs(CamelModel):
    path: str = Field(default="/", min_length=1, description="Directory path to list")


class ReadFileArgs(CamelModel):
    path: str = Field(min_length=1, description="Path to the file to read")


class UploadFileArgs(CamelModel):
    path: str = Field(min_length=1, description="Destination path for the file")
    content: str = Field(description="File content to upload")


class DeleteArgs(CamelModel):
    path: str = Field(min_length=1, description="Path to delete")


class CreateShareArgs(CamelModel):
    path: str = Field(min_length=1, description="Path to share")
    password: str | None = Field(default=None, description="Optional password for the share")
    expire_date: str | None = Field(
        default=None,
        pattern=DATE_PATTERN,
        description="Optional expiration date (YYYY-MM-DD)",
    )


class ListEventsArgs(CamelModel):
    calendar_id: str = Field(default="personal", description="Calendar ID")
    start_date: str | None = Field(
        default=None, pattern=DATE_PATTERN, description="Start date filter (YYYY-MM-DD)"
    )
    end_date: str | None = Field(
        default=None, pattern=DATE_PATTERN, description="End date filter (YYYY-MM-DD)"
    )


class CreateEventArgs(CamelModel):
    calendar_id: str = Field(default="personal", description="Calendar ID")
    summary: str = Field(min_length=1, description="Event title")
    description: str | None = Field(default=None, description="Event description")
    start: str = Field(
        pattern=DATETIME_PATTERN,
        description="Start datetime (ISO 8601, e.g., 2024-01-15T10:00:00)",
    )
    end: str = Field(
        pattern=DATETIME_PATTERN,
        description="End datetime (ISO 8601, e.g., 2024-01-15T11:00:00)",
    )
    location: str | None = Field(default=None, description="Event location")


class DeleteEventArgs(CamelModel):
    calendar_id: str = Field(description="Calendar ID")
    event_id: str = Field(min_length=1, description="Event UID to delete")


class ListContactsArgs(CamelModel):
    address_book_id: str = Field(default="contacts", description="Address book ID")


class GetContactArgs(CamelModel):
    address_book_id: str = Field(default="contacts", description="Address book ID")
    contact_id: str = Field(min_length=1, description="Contact UID")


class CreateContactArgs(CamelModel):
    address_book_id: str = Field(default="contacts", description="Address book ID")
    full_name: str = Field(min_length=1, description="Full name of the contact")
    email: str | None = Field(default=None, pattern=EMAIL_PATTERN, description="Email address")
    phone: str | None = Field(default=None, description="Phone number")
    organization: str | None = Field(default=None, description="Organization/company")
    note: str | None = Field(default=None, description="Notes")
