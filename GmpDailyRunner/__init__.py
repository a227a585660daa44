# GmpDailyRunner/__init__.py
import logging, traceback
import azure.functions as func

try:
    from gmp_main import run  # expects /home/site/wwwroot/gmp_main.py to define run()
except Exception as e:
    logging.error("Failed to import gmp_main.run(): %s\n%s", e, traceback.format_exc())
    raise

from gmpbot.reporters import RaiseReporter


def main(mytimer: func.TimerRequest) -> None:
    logging.info("GmpDailyRunner triggered")
    if mytimer.past_due:
        logging.warning("GmpDailyRunner timer is past due")
    try:
        run(reporter=RaiseReporter())
        logging.info("GmpDailyRunner finished")
    except Exception as e:
        logging.error("GmpDailyRunner runtime error: %s\n%s", e, traceback.format_exc())
        raise
