import sys

from loguru import logger

from cafe_service.env import LOG_LEVEL, LOG_JSON, SERVICE_NAME


def setup_logging() -> None:
    logger.remove()
    if LOG_JSON:
        logger.add(
            sys.stdout,
            level=LOG_LEVEL,
            serialize=True,
        )
    else:
        logger.add(
            sys.stdout,
            format="<green>{time:YYYY-MM-DDTHH:mm:ssZ}</green> | <level>{level: <8}</level> | "
                   + SERVICE_NAME
                   + " | {extra[request_id]} | <level>{message}</level>",
            level=LOG_LEVEL,
        )
    logger.configure(extra={"request_id": "-"})
