"""Telegram wallet bot for EOS accounts."""

__version__ = "0.1.0"
