import logging

import requests

from gmpbot.errors import TelegramSendError

ERROR_PREFIX = "⚠️ GMP Bot error: "


def send_telegram(config, text, session=None):
    """
    Post ``text`` to the configured chat and return Telegram's reply.

    Telegram answers with ``{"ok": true, ...}`` on success; anything else,
    whatever the HTTP status, is treated as a failed send.
    """
    url = f"{config.telegram_api_base}/bot{config.bot_token}/sendMessage"
    body = {
        "chat_id": config.chat_id,
        "text": text,
        "disable_web_page_preview": True,
    }
    http = session or requests
    try:
        resp = http.post(url, json=body, timeout=config.http_timeout)
    except requests.exceptions.RequestException as e:
        # the exception text carries the URL, and with it the bot token
        raise TelegramSendError(f"Telegram request failed: {type(e).__name__}") from e

    try:
        payload = resp.json()
    except ValueError:
        payload = None

    if not isinstance(payload, dict) or not payload.get("ok"):
        raise TelegramSendError(f"Telegram send failed: {resp.text}", response_text=resp.text)

    logging.info(f"Telegram message sent to chat {config.chat_id} ({len(text)} chars)")
    return payload


def notify_error(config, error, session=None):
    try:
        send_telegram(config, f"{ERROR_PREFIX}{error}", session=session)
        return True
    except Exception as e:
        logging.error(f"Failed to send error message to Telegram: {str(e)}")
        return False
