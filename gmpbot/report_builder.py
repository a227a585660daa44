import json
import logging

from gmpbot.formatter import format_ipo_row, get_today_iso, is_closing_today

FALLBACK_HEADER = "📈 IPO GMP Update"
NO_IPOS_LINE = "No IPOs closing today."


def closing_today_header(today_iso):
    return f"📈 IPOs Closing Today ({today_iso})"


def format_message(data, today_iso=None):
    """
    Build the Telegram message for a report payload.

    A payload without a ``reportTableData`` list is dumped as JSON under a
    generic header so the chat still sees what came back.
    """
    rows = data.get("reportTableData") if isinstance(data, dict) else None
    if not isinstance(rows, list):
        logging.warning("Report payload has no reportTableData list, sending raw dump")
        dump = json.dumps(data, indent=2, ensure_ascii=False, default=str)
        return f"{FALLBACK_HEADER}\n\n{dump}"

    today_iso = today_iso or get_today_iso()
    closing_today = [row for row in rows if is_closing_today(row, today_iso)]
    logging.info(f"{len(closing_today)} of {len(rows)} IPOs close on {today_iso}")

    header = closing_today_header(today_iso)
    body = "\n\n".join(format_ipo_row(row) for row in closing_today).strip()
    if not body:
        return f"{header}\n\n{NO_IPOS_LINE}"
    return f"{header}\n\n{body}"
