from .client import TelegramBotClient, decode_data_url

__all__ = ["TelegramBotClient", "decode_data_url"]
