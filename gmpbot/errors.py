class GmpBotError(Exception):
    """Base class for failures that end a bot run."""


class ConfigError(GmpBotError, EnvironmentError):
    pass


class UpstreamError(GmpBotError):
    def __init__(self, message, status_code=None):
        super().__init__(message)
        self.status_code = status_code


class PayloadParseError(GmpBotError, ValueError):
    pass


class TelegramSendError(GmpBotError):
    def __init__(self, message, response_text=None):
        super().__init__(message)
        self.response_text = response_text
