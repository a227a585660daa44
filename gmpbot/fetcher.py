import logging

import requests

from gmpbot.errors import PayloadParseError, UpstreamError
from gmpbot.loadenv import DEFAULT_HTTP_TIMEOUT


def fetch_gmp(url, timeout=DEFAULT_HTTP_TIMEOUT, session=None):
    logging.info(f"Fetching GMP report: {url}")
    http = session or requests
    try:
        resp = http.get(url, timeout=timeout)
    except requests.exceptions.Timeout as e:
        raise UpstreamError(f"API request timed out after {timeout}s") from e
    except requests.exceptions.RequestException as e:
        raise UpstreamError(f"API request failed: {str(e)}") from e

    if not 200 <= resp.status_code < 300:
        logging.warning(f"GMP report returned {resp.status_code}")
        raise UpstreamError(f"API error {resp.status_code}", status_code=resp.status_code)

    try:
        data = resp.json()
    except ValueError as e:
        raise PayloadParseError(f"API returned invalid JSON: {str(e)}") from e

    rows = data.get("reportTableData") if isinstance(data, dict) else None
    logging.info(f"GMP report fetched: {len(rows) if isinstance(rows, list) else 'no'} rows")
    return data
