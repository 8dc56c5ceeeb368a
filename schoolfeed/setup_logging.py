import logging, sys

from schoolfeed.settings import LOG_LEVEL

def setup_logging(level: str = LOG_LEVEL):
    logger = logging.getLogger()
    if logger.handlers:  # already configured (test runner or an earlier sync)
        return
    logger.setLevel(getattr(logging, level.upper(), logging.INFO))
    h = logging.StreamHandler(sys.stdout)
    h.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(name)s :: %(message)s"))
    logger.addHandler(h)
    # urllib3 logs every connection at DEBUG
    logging.getLogger("urllib3").setLevel(max(logger.level, logging.INFO))
