from __future__ import annotations

from collections.abc import Callable

import httpx
import pytest

from mcp_nextcloud.nextcloud_client import NextcloudClient

Handler = Callable[[httpx.Request], httpx.Response]


class RecordingHandler:
    """MockTransport handler that keeps every request and answers from a callback."""

    def __init__(self, respond: Handler) -> None:
        self.respond = respond
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return self.respond(request)

    @property
    def last(self) -> httpx.Request:
        return self.requests[-1]


@pytest.fixture
def make_client() -> Callable[..., tuple[NextcloudClient, RecordingHandler]]:
    def factory(
        respond: Handler, *, base_url: str = "https://cloud.example.com"
    ) -> tuple[NextcloudClient, RecordingHandler]:
        handler = RecordingHandler(respond)
        client = NextcloudClient(
            base_url=base_url,
            username="alice",
            password="secret",
            transport=httpx.MockTransport(handler),
        )
        return client, handler

    return factory


def multistatus(*blocks: str, tag: str = "cal:calendar-data") -> str:
    """Wrap record blocks the way a REPORT multistatus carries them."""
    ns = (
        'xmlns:cal="urn:ietf:params:xml:ns:caldav"'
        if tag.startswith("cal:")
        else 'xmlns:card="urn:ietf:params:xml:ns:carddav"'
    )
    responses = "".join(
        "<d:response><d:href>/item</d:href><d:propstat><d:prop>"
        f"<{tag}>{escape(block)}</{tag}>"
        "</d:prop><d:status>HTTP/1.1 200 OK</d:status></d:propstat></d:response>"
        for block in blocks
    )
    return f'<?xml version="1.0"?><d:multistatus xmlns:d="DAV:" {ns}>{responses}</d:multistatus>'


def escape(text: str) -> str:
    return text.replace("&", "&amp;").replace("<", "&lt;").replace(">", "&gt;")
