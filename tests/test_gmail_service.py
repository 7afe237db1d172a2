from __future__ import annotations

import base64
from unittest.mock import MagicMock

from src.gmail_service import GmailMailbox, search_message_ids


def test_search_follows_page_tokens() -> None:
    service = MagicMock()
    service.users.return_value.messages.return_value.list.return_value.execute.side_effect = [
        {"messages": [{"id": "a"}, {"id": "b"}], "nextPageToken": "p2"},
        {"messages": [{"id": "c"}]},
    ]

    ids = search_message_ids(service, "is:unread", page_size=2)

    list_call = service.users.return_value.messages.return_value.list
    assert ids == ["a", "b", "c"]
    assert list_call.call_args_list[1].kwargs["pageToken"] == "p2"


def test_search_with_no_results() -> None:
    service = MagicMock()
    service.users.return_value.messages.return_value.list.return_value.execute.return_value = {
        "resultSizeEstimate": 0
    }

    assert search_message_ids(service, "is:unread") == []


def test_mailbox_fetch_and_mark_read() -> None:
    service = MagicMock()
    messages = service.users.return_value.messages.return_value
    messages.get.return_value.execute.return_value = {
        "id": "m1",
        "payload": {
            "mimeType": "text/plain",
            "headers": [{"name": "Subject", "value": "hello"}],
            "body": {"data": base64.urlsafe_b64encode("本文".encode("utf-8")).decode("ascii").rstrip("=")},
        },
    }
    mailbox = GmailMailbox(service)

    message = mailbox.fetch("m1")
    mailbox.mark_read("m1")

    assert (message.id, message.subject, message.body) == ("m1", "hello", "本文")
    messages.modify.assert_called_once_with(
        userId="me", id="m1", body={"removeLabelIds": ["UNREAD"]}
    )
