import logging
import json
import traceback
import azure.functions as func

try:
    from gmp_main import run
except Exception as e:
    logging.error("Failed to import gmp_main.run(): %s\n%s", e, traceback.format_exc())
    raise

from gmpbot.reporters import ResponseReporter

TRUTHY = {"1", "true", "yes", "on"}


def _preview_requested(req: func.HttpRequest) -> bool:
    preview = req.params.get("preview")
    if preview is None:
        try:
            body = req.get_json()
            if isinstance(body, dict):
                preview = body.get("preview")
        except ValueError:
            pass
    if isinstance(preview, bool):
        return preview
    return str(preview or "").strip().lower() in TRUTHY


def main(req: func.HttpRequest) -> func.HttpResponse:
    logging.info("GmpBotHttp triggered")
    try:
        preview = _preview_requested(req)
        result = run(reporter=ResponseReporter(), send_message_flag=not preview)
        return func.HttpResponse(
            json.dumps(result.body, default=str, ensure_ascii=False),
            status_code=result.status_code,
            mimetype="application/json",
        )
    except Exception as e:
        logging.error("GmpBotHttp error: %s\n%s", e, traceback.format_exc())
        return func.HttpResponse(
            json.dumps({"error": str(e)}),
            status_code=500,
            mimetype="application/json",
        )
