import logging
import sys
import os
from typing import Optional

import colorama
from colorama import Fore, Style


class ColoredFormatter(logging.Formatter):
    """
    Formatter that colors console lines by log level.
    INFO lines are printed bare; other levels get a "LEVEL: " prefix.
    """
    COLORS = {
        logging.DEBUG: Fore.BLUE,
        logging.INFO: Fore.GREEN,
        logging.WARNING: Fore.YELLOW,
        logging.ERROR: Fore.RED,
        logging.CRITICAL: Fore.RED + Style.BRIGHT,
    }

    def __init__(self, fmt: str = "%(message)s", use_color: bool = True):
        super().__init__(fmt)
        self.use_color = use_color

    def format(self, record: logging.LogRecord) -> str:
        result = super().format(record)
        if record.levelno != logging.INFO:
            result = f"{record.levelname}: {result}"
        if self.use_color:
            color = self.COLORS.get(record.levelno, "")
            result = f"{color}{result}{Style.RESET_ALL}"
        return result


def setup_logging(
    console_level: int = logging.INFO,
    file_path: Optional[str] = None,
    file_level: int = logging.DEBUG,
    no_color: bool = False
) -> logging.Logger:
    """
    Sets up the root logger with:
    - Console handler (colored when stdout is a terminal)
    - Optional file handler (plain text, detailed format)
    """
    colorama.init()

    if os.environ.get("NO_COLOR"):
        no_color = True

    logger = logging.getLogger()
    logger.setLevel(logging.DEBUG)  # handlers filter

    # Avoid duplicate handlers on repeated setup
    if logger.hasHandlers():
        logger.handlers.clear()

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(console_level)

    is_tty = sys.stdout.isatty() if hasattr(sys.stdout, "isatty") else False
    console_handler.setFormatter(ColoredFormatter("%(message)s", use_color=is_tty and not no_color))
    logger.addHandler(console_handler)

    if file_path:
        file_handler = logging.FileHandler(file_path, mode='w', encoding='utf-8')
        file_handler.setLevel(file_level)
        file_handler.setFormatter(logging.Formatter('%(asctime)s - %(name)s - %(levelname)s - %(message)s'))
        logger.addHandler(file_handler)

    # matplotlib is chatty at DEBUG
    logging.getLogger("matplotlib").setLevel(logging.WARNING)

    return logger
