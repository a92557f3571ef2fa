import logging


LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s - %(message)s"


def configure_logging(level: str = "INFO") -> None:
    logging.basicConfig(format=LOG_FORMAT, level=getattr(logging, level, logging.INFO))
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
