from __future__ import annotations

import pytest

import config
from src.inbox_scanner import scan_donations
from tests.fakes import FakeMailbox, donation_message


def test_yields_parsed_donation_with_message_id() -> None:
    mailbox = FakeMailbox([donation_message("m1")])

    found = list(scan_donations(mailbox))

    assert mailbox.queries == [config.SEARCH_QUERY]
    assert [f.message_id for f in found] == ["m1"]
    assert found[0].details.amount == 12345
    assert found[0].details.name == "山田 太郎"


def test_search_query_scopes_to_unread_subject() -> None:
    assert config.SEARCH_QUERY == 'subject:"【Syncable】新規の支援を受け付けました。" is:unread'


def test_unparseable_message_is_skipped_and_left_unread() -> None:
    mailbox = FakeMailbox([
        donation_message("bad", body="支援受付日時: 2024/3/5 9:7:1\n"),
        donation_message("good"),
    ])

    found = list(scan_donations(mailbox))

    assert [f.message_id for f in found] == ["good"]
    assert mailbox.read == []


def test_fetch_error_does_not_stop_the_scan() -> None:
    mailbox = FakeMailbox([donation_message("m1"), donation_message("m2")])
    mailbox.fetch_errors["m1"] = RuntimeError("boom")

    found = list(scan_donations(mailbox))

    assert [f.message_id for f in found] == ["m2"]


def test_subject_must_match_exactly() -> None:
    mailbox = FakeMailbox([
        donation_message("fwd", subject="Fwd: " + config.DONATION_SUBJECT),
        donation_message("m1"),
    ])

    found = list(scan_donations(mailbox))

    assert [f.message_id for f in found] == ["m1"]


def test_search_failure_propagates() -> None:
    mailbox = FakeMailbox(search_error=RuntimeError("search failed"))

    with pytest.raises(RuntimeError):
        list(scan_donations(mailbox))
