import logging

log_format = "%(levelname)s | %(asctime)s | %(name)s | %(filename)s[line:%(lineno)d]: %(message)s"
log_date_format = "%Y-%m-%d %H:%M:%S"

logger = logging.getLogger("aliyun_sms")
logger.addHandler(logging.NullHandler())


# opt-in console output for applications and example scripts
def add_stream_handler(level: int = logging.INFO) -> logging.Handler:
    handler = logging.StreamHandler()
    handler.setLevel(level)
    handler.setFormatter(
        logging.Formatter(log_format, datefmt=log_date_format)
    )
    logger.addHandler(handler)
    logger.setLevel(level)
    return handler
