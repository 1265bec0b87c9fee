"""File tools backed by WebDAV and the OCS share API."""

from __future__ import annotations

from typing import Any

from .models import (
    CreateShareArgs,
    DeleteArgs,
    FileEntry,
    ListFilesArgs,
    ReadFileArgs,
    ShareLink,
    UploadFileArgs,
)
from .nextcloud_client import NextcloudClient
from .toolkit import ToolModule, ToolSpec


def file_tools(client: NextcloudClient) -> ToolModule:
    async def list_files(args: ListFilesArgs) -> list[FileEntry]:
        return await client.list_entries(args.path)

    async def read_file(args: ReadFileArgs) -> dict[str, Any]:
        content = await client.read_entry(args.path)
        return {"path": args.path, "content": content}

    async def upload_file(args: UploadFileArgs) -> dict[str, Any]:
        await client.write_entry(args.path, args.content)
        return {"path": args.path, "message": "File uploaded successfully"}

    async def delete(args: DeleteArgs) -> dict[str, Any]:
        await client.remove_entry(args.path)
        return {"path": args.path, "message": "Deleted successfully"}

    async def create_share(args: CreateShareArgs) -> ShareLink:
        return await client.create_share(
            args.path, password=args.password, expire_date=args.expire_date
        )

    return ToolModule(
        name="files",
        tools=(
            ToolSpec(
                "nextcloud_list_files",
                "List files and folders in a Nextcloud directory",
                ListFilesArgs,
                list_files,
            ),
            ToolSpec(
                "nextcloud_read_file",
                "Read the contents of a text file from Nextcloud",
                ReadFileArgs,
                read_file,
            ),
            ToolSpec(
                "nextcloud_upload_file",
                "Upload a file to Nextcloud (overwrites an existing file)",
                UploadFileArgs,
                upload_file,
            ),
            ToolSpec(
                "nextcloud_delete",
                "Delete a file or folder from Nextcloud",
                DeleteArgs,
                delete,
            ),
            ToolSpec(
                "nextcloud_create_share",
                "Create a public share link for a file or folder",
                CreateShareArgs,
                create_share,
            ),
        ),
    )
