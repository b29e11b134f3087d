import os

from registration.config.settings import get_settings
from registration.shared.logger import JohnWickLogger


def get_logger(name: str = None) -> JohnWickLogger:
    """
    Return the JohnWickLogger for ``name`` configured from settings
    (log file and level). Defaults to the application name.
    """
    settings = get_settings()

    # Ensure the log directory exists
    log_dir = os.path.dirname(settings.app.log_file)
    if log_dir and not os.path.exists(log_dir):
        os.makedirs(log_dir, exist_ok=True)

    return JohnWickLogger(
        name=name or settings.app.app_name,
        log_file=settings.app.log_file,
        level=settings.app.log_level,
    )


__all__ = ["get_logger", "JohnWickLogger"]
