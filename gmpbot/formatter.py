import re
import logging
from datetime import date, datetime
from zoneinfo import ZoneInfo

from dateutil import parser as date_parser

from gmpbot.loadenv import DEFAULT_TIMEZONE

NAMED_ENTITIES = {
    "&nbsp;": " ",
    "&amp;": "&",
    "&lt;": "<",
    "&gt;": ">",
    "&quot;": '"',
    "&#39;": "'",
}

MONTH_SHORT = {
    "jan": 1, "feb": 2, "mar": 3, "apr": 4, "may": 5, "jun": 6,
    "jul": 7, "aug": 8, "sep": 9, "oct": 10, "nov": 11, "dec": 12,
}

# Tried in order before the generic parser. Slashed dates are read day first
# (Indian convention), unlike a JavaScript Date which reads 04/05/2024 as 5 April.
EXPLICIT_DATE_FORMATS = [
    "%d-%b-%Y",
    "%d %b %Y",
    "%b %d, %Y",
    "%a, %b %d, %Y",
    "%d/%m/%Y",
    "%Y/%m/%d",
]

NUMERIC_ENTITY_RE = re.compile(r"&#(\d+);")
TAG_RE = re.compile(r"<[^>]*>")
WHITESPACE_RE = re.compile(r"\s+")
ISO_DATE_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$", re.ASCII)
SHORT_DATE_RE = re.compile(r"^(\d{1,2})-([A-Za-z]{3})$", re.ASCII)
ISO_DATETIME_RE = re.compile(r"^\d{4}-\d{2}-\d{2}[T ]", re.ASCII)
YEAR_FIRST_RE = re.compile(r"^\d{4}\D", re.ASCII)

# Two unrelated defaults: a component missing from the input shows up as a difference.
PARSE_DEFAULTS = (datetime(2000, 1, 1), datetime(2001, 2, 2))

ACTION_LINE = "  Action: Apply today before the window closes ✅"


def _code_point(match):
    try:
        return chr(int(match.group(1)))
    except (ValueError, OverflowError):
        return ""


def decode_html_entities(text):
    if not isinstance(text, str):
        return ""
    decoded = NUMERIC_ENTITY_RE.sub(_code_point, text)
    for entity, char in NAMED_ENTITIES.items():
        decoded = decoded.replace(entity, char)
    return decoded


def strip_html(text):
    if not isinstance(text, str):
        return ""
    without_tags = TAG_RE.sub(" ", text)
    return WHITESPACE_RE.sub(" ", decode_html_entities(without_tags)).strip()


def get_today_iso(tz=DEFAULT_TIMEZONE, now=None):
    now = now or datetime.now(ZoneInfo(tz))
    if now.tzinfo is not None:
        now = now.astimezone(ZoneInfo(tz))
    return now.strftime("%Y-%m-%d")


def _valid_iso(year, month, day):
    try:
        return date(year, month, day).isoformat()
    except ValueError:
        return None


def normalize_date(value, today=None, tz=DEFAULT_TIMEZONE):
    """
    Turn one of the report's date spellings into ``YYYY-MM-DD``.

    Handles ISO dates, the table's short ``05-Apr`` form (assumed to be in the
    current year, no fiscal rollover), a handful of explicit long formats and,
    as a last resort, whatever ``dateutil`` can make of it. Never raises:
    anything unparseable comes back as ``None``.
    """
    if not value or not isinstance(value, str):
        return None
    trimmed = value.strip()
    if not trimmed:
        return None

    if ISO_DATE_RE.match(trimmed):
        year, month, day = (int(part) for part in trimmed.split("-"))
        return trimmed if _valid_iso(year, month, day) else None

    short_match = SHORT_DATE_RE.match(trimmed)
    if short_match:
        month = MONTH_SHORT.get(short_match.group(2).lower())
        if month:
            year = (today or datetime.now(ZoneInfo(tz)).date()).year
            return _valid_iso(year, month, int(short_match.group(1)))

    for fmt in EXPLICIT_DATE_FORMATS:
        try:
            return datetime.strptime(trimmed, fmt).date().isoformat()
        except ValueError:
            continue

    # Aware timestamps are pinned to the report timezone.
    try:
        if ISO_DATETIME_RE.match(trimmed):
            return _calendar_date(date_parser.isoparse(trimmed), tz)

        year_first = bool(YEAR_FIRST_RE.match(trimmed))
        candidates = {
            _calendar_date(date_parser.parse(trimmed, default=default, dayfirst=not year_first,
                                             yearfirst=year_first), tz)
            for default in PARSE_DEFAULTS
        }
    except Exception:
        logging.debug(f"Unparseable date: {trimmed!r}")
        return None

    if len(candidates) != 1:
        logging.debug(f"Date without year, month and day: {trimmed!r}")
        return None
    return candidates.pop()


def _calendar_date(parsed, tz):
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(ZoneInfo(tz))
    return parsed.date().isoformat()


def get_close_date_iso(row, today=None):
    if not isinstance(row, dict):
        return None
    raw = row.get("~Srt_Close") or row.get("Close")
    return normalize_date(strip_html(raw), today=today)


def is_closing_today(row, today_iso=None):
    today_iso = today_iso or get_today_iso()
    close_iso = get_close_date_iso(row, today=date.fromisoformat(today_iso))
    return close_iso is not None and close_iso == today_iso


def format_ipo_row(row):
    name = strip_html(row.get("Name")) or "Unknown IPO"
    gmp = strip_html(row.get("GMP")) or "-"
    price = strip_html(row.get("Price")) or "-"
    subs = strip_html(row.get("Sub")) or "-"
    gmp_range = strip_html(row.get("GMP(L/H)")) or "-"
    open_ = strip_html(row.get("Open"))
    close = strip_html(row.get("Close"))
    window = f"{open_ or '-'} – {close or '-'}" if open_ or close else "-"
    listing = strip_html(row.get("Listing")) or "-"
    updated = strip_html(row.get("Updated-On")) or "-"

    return "\n".join([
        f"• {name}",
        f"  GMP: {gmp}",
        f"  Price: {price}",
        f"  Subscriptions: {subs}",
        f"  GMP Range: {gmp_range}",
        f"  Window: {window}",
        f"  Listing: {listing}",
        f"  Updated: {updated}",
        ACTION_LINE,
    ])
