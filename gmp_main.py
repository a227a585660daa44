#!/usr/bin/env python3
# -*- coding: utf-8 -*-

import sys
import logging
import traceback
from datetime import datetime
from zoneinfo import ZoneInfo

from gmpbot.errors import ConfigError
from gmpbot.fetcher import fetch_gmp
from gmpbot.formatter import get_today_iso
from gmpbot.loadenv import load_config
from gmpbot.notifier import notify_error, send_telegram
from gmpbot.report_builder import format_message
from gmpbot.reporters import ExitReporter, RaiseReporter
from gmpbot.url_builder import build_api_url


def run(config=None, reporter=None, now=None, send_message_flag=True, session=None):
    """
    Fetch today's GMP report and post the IPOs closing today to Telegram.

    ``reporter`` decides how the outcome leaves this function (exit code,
    HTTP response or exception); the work itself is the same for every
    trigger. Any failure after configuration is loaded is reported to the
    chat once, best effort, before the reporter sees it.
    """
    reporter = reporter or RaiseReporter()
    try:
        config = config or load_config()
    except ConfigError as e:
        logging.error(f"Configuration error: {str(e)}")
        return reporter.failure(e)

    try:
        now = now or datetime.now(ZoneInfo(config.timezone))
        url = build_api_url(config.api_url, config.report_id, now=now)
        data = fetch_gmp(url, timeout=config.http_timeout, session=session)
        message = format_message(data, get_today_iso(config.timezone, now=now))
        logging.info(f"Composed message ({len(message)} chars)")

        if not send_message_flag:
            logging.info("Preview requested, message not sent")
            return reporter.success(message, None)

        ack = send_telegram(config, message, session=session)
        return reporter.success(message, ack)
    except Exception as e:
        logging.error(f"GMP bot run failed: {str(e)}\n{traceback.format_exc()}")
        notify_error(config, e, session=session)
        return reporter.failure(e)


def main():
    logging.basicConfig(level=logging.INFO)
    run(reporter=ExitReporter())


if __name__ == "__main__":
    sys.exit(main())
