import logging

from wallet_bot.logging import ColoredConsoleFormatter, FileFormatter, RedactKeysFilter, get_logger, setup_logging

WIF_KEY = "5KQwrPbwdL6PhXujxW37FSSQZ1JiwsST4cqQzDeyXtP79zkvFD3"


def _record(name: str, msg: str, *args) -> logging.LogRecord:
    return logging.LogRecord(name, logging.INFO, __file__, 1, msg, args, None)


def test_redact_filter_masks_private_keys():
    record = _record("wallet.vault", "key was %s", WIF_KEY)

    assert RedactKeysFilter().filter(record) is True
    assert WIF_KEY not in record.getMessage()
    assert "[REDACTED]" in record.getMessage()


def test_redact_filter_leaves_public_keys_alone():
    record = _record("wallet.accounts", "imported EOS6MRyAjQq8ud7hVNYcfnVPJqcVpscN5So8BhtHuGYqET5GDW5CV")
    RedactKeysFilter().filter(record)
    assert "EOS6MRyAjQq8ud7hVNYcfnVPJqcVpscN5So8BhtHuGYqET5GDW5CV" in record.getMessage()


def test_formatters_prefix_area_from_logger_name():
    record = _record("wallet.orders", "placed")
    record.chat_id = 42

    assert "[WALLET.orders]" in ColoredConsoleFormatter().format(record)
    line = FileFormatter().format(record)
    assert "[WALLET.orders] INFO: placed chat_id=42" in line


def test_area_loggers_write_to_file_set_up_later(tmp_path):
    logger = get_logger("telegram")
    log_dir = setup_logging(str(tmp_path))

    logger.warning("webhook rejected")
    for handler in logging.getLogger("wallet").handlers:
        handler.flush()

    log_file = next(p for p in log_dir.iterdir() if p.name.startswith("wallet_bot_"))
    assert "[WALLET.telegram] WARNING: webhook rejected" in log_file.read_text(encoding="utf-8")
