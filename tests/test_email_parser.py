from __future__ import annotations

import base64

from src.email_parser import extract_donation_details, parse_message

BODY = """\
新規の支援を受け付けました。

支援受付日時: 2024/3/5 9:7:1
支援付者名: 山田 太郎  (ID: 12345)
支援金額: 12,345 円
支援頻度: 毎月 (継続)
"""


def _b64(text: str) -> str:
    return base64.urlsafe_b64encode(text.encode("utf-8")).decode("ascii")


def test_extracts_all_fields() -> None:
    details = extract_donation_details(BODY)

    assert details is not None
    assert details.date == "2024/03/05 09:07:01"
    assert details.name == "山田 太郎"
    assert details.amount == 12345
    assert details.frequency == "毎月"


def test_amount_without_space_before_unit() -> None:
    details = extract_donation_details(BODY.replace("12,345 円", "1,000円"))

    assert details is not None
    assert details.amount == 1000


def test_missing_frequency_yields_none() -> None:
    body = "\n".join(line for line in BODY.splitlines() if "支援頻度" not in line)

    assert extract_donation_details(body) is None


def test_amount_without_unit_yields_none() -> None:
    assert extract_donation_details(BODY.replace("12,345 円", "12,345")) is None


def test_amount_of_only_separators_yields_none() -> None:
    assert extract_donation_details(BODY.replace("12,345 円", ",,, 円")) is None


def test_crlf_body() -> None:
    details = extract_donation_details(BODY.replace("\n", "\r\n"))

    assert details is not None
    assert details.date == "2024/03/05 09:07:01"
    assert details.frequency == "毎月"


def test_parse_message_prefers_plain_text_part() -> None:
    message = {
        "id": "m1",
        "payload": {
            "mimeType": "multipart/alternative",
            "headers": [
                {"name": "Subject", "value": "【Syncable】新規の支援を受け付けました。"},
                {"name": "From", "value": "noreply@syncable.biz"},
                {"name": "Date", "value": "Tue, 05 Mar 2024 09:07:01 +0900"},
            ],
            "parts": [
                {"mimeType": "text/plain", "body": {"data": _b64(BODY)}},
                {"mimeType": "text/html", "body": {"data": _b64("<p>ignored</p>")}},
            ],
        },
    }

    parsed = parse_message(message)

    assert parsed.id == "m1"
    assert parsed.subject == "【Syncable】新規の支援を受け付けました。"
    assert parsed.body == BODY


def test_parse_message_falls_back_to_html() -> None:
    html = "<html><body>" + "".join(f"<p>{line}</p>" for line in BODY.splitlines() if line) + "</body></html>"
    message = {
        "id": "m2",
        "payload": {
            "mimeType": "multipart/alternative",
            "headers": [],
            "parts": [{"mimeType": "text/html", "body": {"data": _b64(html)}}],
        },
    }

    parsed = parse_message(message)
    details = extract_donation_details(parsed.body)

    assert parsed.subject == ""
    assert details is not None
    assert details.amount == 12345
