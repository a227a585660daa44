from datetime import datetime
from unittest.mock import MagicMock
from zoneinfo import ZoneInfo

import pytest

from gmpbot.loadenv import GmpConfig

IST = ZoneInfo("Asia/Kolkata")


def make_response(status_code=200, json_data=None, text=None, json_error=None):
    resp = MagicMock()
    resp.status_code = status_code
    if json_error is not None:
        resp.json.side_effect = json_error
    else:
        resp.json.return_value = json_data
    resp.text = text if text is not None else repr(json_data)
    return resp


@pytest.fixture
def config():
    return GmpConfig(
        api_url="https://reports.example.com/api/",
        bot_token="123:secret-token",
        chat_id="-100200300",
    )


@pytest.fixture
def now():
    return datetime(2024, 4, 5, 9, 30, tzinfo=IST)


@pytest.fixture
def closing_row():
    return {
        "Name": "<b>Foo</b>",
        "Close": "05-Apr",
        "~Srt_Close": "2024-04-05",
        "GMP": "50",
    }


@pytest.fixture
def session():
    return MagicMock()
