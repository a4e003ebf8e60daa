import logging
import logging.config

from config import AppConfig

def setup_logger(app_config: AppConfig) -> logging.Logger:
    if app_config.log_to_file:
        app_config.log_dir.mkdir(exist_ok=True, parents=True)
    logging.config.dictConfig(app_config.get_logging_config())
    return logging.getLogger()
