"""
Completion reporters: how a finished run is surfaced to whoever started it.

run() does the same work for every trigger; only the reporter differs.
"""
import sys
import logging
from collections import namedtuple
from datetime import datetime, timezone

RunResult = namedtuple("RunResult", ["status_code", "body"])


class RaiseReporter:
    """Timer trigger: return the ack, let failures propagate to the Functions host."""

    def success(self, message, ack):
        return ack

    def failure(self, error):
        raise error


class ExitReporter:
    """Standalone script: exit 0 on success, 1 on failure."""

    def success(self, message, ack):
        logging.info(f"✅ Sent at {datetime.now().strftime('%Y-%m-%d %H:%M:%S')}")
        sys.exit(0)

    def failure(self, error):
        logging.error(f"Error: {error}")
        sys.exit(1)


class ResponseReporter:
    """HTTP trigger: a RunResult the handler turns into a JSON response."""

    def success(self, message, ack):
        if ack is None:
            return RunResult(200, {"ok": True, "preview": True, "message": message})
        return RunResult(200, {"ok": True, "sent": datetime.now(timezone.utc).isoformat()})

    def failure(self, error):
        return RunResult(500, {"error": str(error)})
