import os
import logging
from dataclasses import dataclass

from azure.identity import DefaultAzureCredential
from azure.keyvault.secrets import SecretClient
from dotenv import load_dotenv

from gmpbot.errors import ConfigError

REQUIRED_KEYS = ["API_URL", "BOT_TOKEN", "CHAT_ID"]
DEFAULT_REPORT_ID = "331"
DEFAULT_TIMEZONE = "Asia/Kolkata"
DEFAULT_HTTP_TIMEOUT = 15
TELEGRAM_API_BASE = "https://api.telegram.org"
BOT_TOKEN_SECRET_NAME = "BotToken"


@dataclass(frozen=True)
class GmpConfig:
    api_url: str
    bot_token: str
    chat_id: str
    report_id: str = DEFAULT_REPORT_ID
    timezone: str = DEFAULT_TIMEZONE
    http_timeout: float = DEFAULT_HTTP_TIMEOUT
    telegram_api_base: str = TELEGRAM_API_BASE

    def __repr__(self):
        # keep the bot token out of tracebacks and log lines
        return (f"GmpConfig(api_url={self.api_url!r}, chat_id={self.chat_id!r}, "
                f"report_id={self.report_id!r}, timezone={self.timezone!r})")


def running_in_azure(environ=None):
    environ = os.environ if environ is None else environ
    return environ.get("FUNCTIONS_WORKER_RUNTIME") == "python"


def load_env(dotenv_path=None, required_keys=None, raise_on_missing=True):
    """
    Load environment variables from a .env file and verify required keys.

    Values already present in the process environment win over the file.
    """
    # Skip loading in Azure (env vars are in Function App Settings)
    if running_in_azure():
        logging.info("Running in Azure, skipping .env load")
    else:
        if dotenv_path is None:
            # loadenv.py lives in gmpbot/, the .env sits one directory up
            dotenv_path = os.path.join(os.path.dirname(os.path.dirname(os.path.abspath(__file__))), ".env")
        if load_dotenv(dotenv_path=dotenv_path):
            logging.info(f".env file loaded from {dotenv_path}")
        else:
            logging.info(f"No .env file at {dotenv_path}, using process environment only")

    found_env = {key: os.getenv(key) for key in required_keys or [] if os.getenv(key)}
    missing_keys = [key for key in required_keys or [] if not os.getenv(key)]
    for key in required_keys or []:
        logging.info(f"  {key}: {'FOUND' if key in found_env else 'MISSING'}")

    if missing_keys and raise_on_missing:
        raise ConfigError(f"Missing required env vars: {', '.join(missing_keys)}")
    return found_env


def get_bot_token_from_key_vault(vault_name):
    """Read the bot token secret from Azure Key Vault, None on any failure."""
    try:
        vault_url = f"https://{vault_name}.vault.azure.net/"
        client = SecretClient(vault_url=vault_url, credential=DefaultAzureCredential())
        token = client.get_secret(BOT_TOKEN_SECRET_NAME).value
        return token.strip() if token else None
    except Exception as e:
        logging.error(f"Failed to fetch {BOT_TOKEN_SECRET_NAME} from Key Vault {vault_name}: {str(e)}")
        return None


def load_config(environ=None, dotenv_path=None):
    """
    Build the GmpConfig for one run.

    Passing ``environ`` skips the .env file and the process environment, which
    is how tests supply their own settings.
    """
    if environ is None:
        load_env(dotenv_path=dotenv_path, required_keys=REQUIRED_KEYS, raise_on_missing=False)
        environ = os.environ

    values = {key: (environ.get(key) or "").strip() for key in REQUIRED_KEYS}

    vault_name = (environ.get("KEY_VAULT_NAME") or "").strip()
    if not values["BOT_TOKEN"] and vault_name and running_in_azure(environ):
        logging.info(f"BOT_TOKEN not set, reading it from Key Vault {vault_name}")
        values["BOT_TOKEN"] = get_bot_token_from_key_vault(vault_name) or ""

    missing_keys = [key for key in REQUIRED_KEYS if not values[key]]
    if missing_keys:
        raise ConfigError(f"Missing required env vars: {', '.join(missing_keys)}")

    return GmpConfig(
        api_url=values["API_URL"],
        bot_token=values["BOT_TOKEN"],
        chat_id=values["CHAT_ID"],
        report_id=(environ.get("API_REPORT_ID") or "").strip() or DEFAULT_REPORT_ID,
    )
