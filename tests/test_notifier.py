"""
Tests for the Telegram notifier.
"""

import logging

import pytest
import requests

from gmpbot.errors import TelegramSendError
from gmpbot.notifier import notify_error, send_telegram
from tests.conftest import make_response


class TestSendTelegram:

    def test_posts_message(self, config, session):
        ack = {"ok": True, "result": {"message_id": 7}}
        session.post.return_value = make_response(200, ack)

        assert send_telegram(config, "hello", session=session) == ack
        session.post.assert_called_once_with(
            "https://api.telegram.org/bot123:secret-token/sendMessage",
            json={"chat_id": "-100200300", "text": "hello", "disable_web_page_preview": True},
            timeout=15,
        )

    @pytest.mark.parametrize("status, body", [
        (200, {"ok": False, "description": "Bad Request: chat not found"}),
        (200, {"result": {}}),
        (400, {"ok": False, "error_code": 400}),
        (200, ["ok"]),
    ])
    def test_missing_ok_flag_is_an_error(self, config, session, status, body):
        session.post.return_value = make_response(status, body, text=str(body))

        with pytest.raises(TelegramSendError) as exc:
            send_telegram(config, "hello", session=session)
        assert str(body) in str(exc.value)
        assert exc.value.response_text == str(body)

    def test_ok_flag_wins_over_status(self, config, session):
        session.post.return_value = make_response(500, {"ok": True})
        assert send_telegram(config, "hello", session=session) == {"ok": True}

    def test_non_json_reply(self, config, session):
        session.post.return_value = make_response(502, json_error=ValueError("no json"), text="<html>Bad Gateway</html>")

        with pytest.raises(TelegramSendError, match="Bad Gateway"):
            send_telegram(config, "hello", session=session)

    def test_transport_error_hides_token(self, config, session):
        session.post.side_effect = requests.exceptions.ConnectionError(
            "HTTPSConnectionPool(host='api.telegram.org'): /bot123:secret-token/sendMessage"
        )

        with pytest.raises(TelegramSendError) as exc:
            send_telegram(config, "hello", session=session)
        assert "secret-token" not in str(exc.value)


class TestNotifyError:

    def test_sends_prefixed_error(self, config, session):
        session.post.return_value = make_response(200, {"ok": True})

        assert notify_error(config, RuntimeError("API error 503"), session=session) is True
        sent = session.post.call_args.kwargs["json"]["text"]
        assert sent == "⚠️ GMP Bot error: API error 503"

    def test_failure_is_logged_and_swallowed(self, config, session, caplog):
        session.post.side_effect = requests.exceptions.ConnectionError("down")

        with caplog.at_level(logging.ERROR):
            assert notify_error(config, RuntimeError("boom"), session=session) is False
        assert "Failed to send error message to Telegram" in caplog.text
        assert session.post.call_count == 1
