"""Calendar tools backed by CalDAV."""

from __future__ import annotations

from typing import Any

from .models import CreateEventArgs, DeleteEventArgs, EventRecord, ListEventsArgs
from .nextcloud_client import NextcloudClient
from .toolkit import ToolModule, ToolSpec


def calendar_tools(client: NextcloudClient) -> ToolModule:
    async def list_events(args: ListEventsArgs) -> list[EventRecord]:
        return await client.list_events(args.calendar_id, args.start_date, args.end_date)

    async def create_event(args: CreateEventArgs) -> dict[str, Any]:
        uid = await client.create_event(
            args.calendar_id,
            summary=args.summary,
            start=args.start,
            end=args.end,
            description=args.description,
            location=args.location,
        )
        return {"uid": uid, "message": "Event created successfully"}

    async def delete_event(args: DeleteEventArgs) -> dict[str, Any]:
        await client.delete_event(args.calendar_id, args.event_id)
        return {"eventId": args.event_id, "message": "Event deleted successfully"}

    return ToolModule(
        name="calendar",
        tools=(
            ToolSpec(
                "nextcloud_list_events",
                "List calendar events from Nextcloud (whole calendar when no dates are given)",
                ListEventsArgs,
                list_events,
            ),
            ToolSpec(
                "nextcloud_create_event",
                "Create a calendar event in Nextcloud",
                CreateEventArgs,
                create_event,
            ),
            ToolSpec(
                "nextcloud_delete_event",
                "Delete a calendar event from Nextcloud",
                DeleteEventArgs,
                delete_event,
            ),
        ),
    )
