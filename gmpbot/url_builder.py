from datetime import datetime
from urllib.parse import urlencode
from zoneinfo import ZoneInfo

from gmpbot.loadenv import DEFAULT_REPORT_ID, DEFAULT_TIMEZONE

FISCAL_YEAR_START_MONTH = 4  # April


def fiscal_year_label(date):
    """Indian fiscal year label for ``date``, e.g. 2024-25 for any day Apr 2024 - Mar 2025."""
    start = date.year if date.month >= FISCAL_YEAR_START_MONTH else date.year - 1
    return f"{start}-{str(start + 1)[-2:]}"


def build_cache_buster(date):
    return f"{date.day:02d}-{date.hour:02d}{date.minute:02d}"


def build_api_url(base_url, report_id=DEFAULT_REPORT_ID, now=None, tz=DEFAULT_TIMEZONE):
    """
    Report endpoint for the month of ``now``.

    The upstream expects month/year/fiscal path segments that roll over with
    the calendar, plus a ``v`` token so intermediary caches never serve a
    stale table.
    """
    now = now or datetime.now(ZoneInfo(tz))
    base = base_url.strip()
    if base.endswith("/"):
        base = base[:-1]
    report_id = str(report_id).strip()

    # month is sent without a leading zero
    path = f"{base}/{report_id}/1/{now.month}/{now.year}/{fiscal_year_label(now)}/0/ipo"
    query = urlencode({"search": "", "v": build_cache_buster(now)})
    return f"{path}?{query}"
