import os
import logging.config
from dotenv import load_dotenv

from ace7crypt.utils.conversions import mb_to_bytes

VERSION = "v1.2.0"

load_dotenv()

# LOGGER
def setup_logger(path: str, logger_type: str, level: str) -> logging.Logger:
    dirname = os.path.dirname(path)

    if dirname and not os.path.exists(dirname):
        os.makedirs(dirname)
    if not os.path.exists(path):
        with open(path, "w"):
            ...

    logger = logging.getLogger(logger_type)

    logging_config = {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "detailed": {
                "format": "[%(levelname)s|%(module)s|L%(lineno)d] %(asctime)s: %(message)s",
                "datefmt": "%Y-%m-%d - %H:%M:%S%z"
            }
        },
        "handlers": {
            logger_type: {
                "class": "logging.handlers.RotatingFileHandler",
                "level": level,
                "formatter": "detailed",
                "filename": path,
                "maxBytes": 25 * 1024 * 1024,
                "backupCount": 3
            }
        },
        "loggers": {
            logger_type: {
                "level": level,
                "handlers": [
                    logger_type
                ]
            }
        }
    }
    logging.config.dictConfig(config=logging_config)

    return logger

LOG_PATH = os.getenv("ACE7_LOG_PATH", os.path.join("logs", "ACE7CRYPT.log"))
LOG_LEVEL = os.getenv("ACE7_LOG_LEVEL", "INFO").upper()
logger = setup_logger(LOG_PATH, "ACE7CRYPT_LOGS", LOG_LEVEL)

# CONFIG
def env_flag(name: str, default: bool = False) -> bool:
    val = os.getenv(name)
    if val is None:
        return default
    return val.strip().lower() in ("1", "true", "yes", "on")

KEY_TABLE_PATH = os.getenv("ACE7_KEY_TABLE_PATH", "")
PRIMARY_EXT = os.getenv("ACE7_PRIMARY_EXT", ".uasset")

# ASSET FORMAT
COMPANION_EXT = ".uexp"
BACKUP_SUFFIX = ".bak"
SIGNATURE_SIZE = 4

# IO
CHUNKSIZE = mb_to_bytes(1)
RANDOMSTRING_LENGTH = 10
