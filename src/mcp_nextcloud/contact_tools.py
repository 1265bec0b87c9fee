"""Contact tools backed by CardDAV."""

from __future__ import annotations

from typing import Any

from .models import ContactRecord, CreateContactArgs, GetContactArgs, ListContactsArgs
from .nextcloud_client import NextcloudClient
from .toolkit import ToolModule, ToolSpec


def contact_tools(client: NextcloudClient) -> ToolModule:
    async def list_contacts(args: ListContactsArgs) -> list[ContactRecord]:
        return await client.list_contacts(args.address_book_id)

    async def get_contact(args: GetContactArgs) -> ContactRecord:
        return await client.get_contact(args.address_book_id, args.contact_id)

    async def create_contact(args: CreateContactArgs) -> dict[str, Any]:
        uid = await client.create_contact(
            args.address_book_id,
            full_name=args.full_name,
            email=args.email,
            phone=args.phone,
            organization=args.organization,
            note=args.note,
        )
        return {"uid": uid, "message": "Contact created successfully"}

    return ToolModule(
        name="contacts",
        tools=(
            ToolSpec(
                "nextcloud_list_contacts",
                "List contacts from a Nextcloud address book",
                ListContactsArgs,
                list_contacts,
            ),
            ToolSpec(
                "nextcloud_get_contact",
                "Get details of a specific contact",
                GetContactArgs,
                get_contact,
            ),
            ToolSpec(
                "nextcloud_create_contact",
                "Create a new contact in Nextcloud",
                CreateContactArgs,
                create_contact,
            ),
        ),
    )
