import os
import sys
import time
import logging
import colorlog
from .config import conf
from .const_var import work_directory

log_colors = {
    'DEBUG': 'cyan',
    'INFO': 'green',
    'WARNING': 'bold_yellow',
    'ERROR': 'bold_red',
    'CRITICAL': 'bold_red,bg_white',
}


def with_color(raw_format: str) -> str:
    return raw_format % {
        "asctime": "%(thin_white)s%(asctime)s%(reset)s",
        "name": "%(name)s",
        "processName": "%(processName)s",
        "process": "%(process)s",
        "message": "%(bold_blue)s%(message)s%(reset)s",
        "levelname": "%(log_color)s%(levelname)s%(reset)s"
    }


class Logger:
    def __init__(self, name="siphon"):
        self.logger = logging.getLogger(name)
        self._handlers = []
        self.configure()

    def configure(self):
        """(Re)build handlers from the current ``conf`` values."""
        for handler in self._handlers:
            self.logger.removeHandler(handler)
            handler.close()
        self._handlers = []

        level = conf.get("logger", "level")
        log_format = conf.get("logger", "formatter").replace("$", "%")
        time_format = conf.get("logger", "time_format").replace("$", "%")
        save_path = conf.get("logger", "save_path")

        self.logger.setLevel(level)
        if conf.get("logger", "console"):
            console = logging.StreamHandler(sys.stdout)
            console.setFormatter(colorlog.ColoredFormatter(with_color(log_format), datefmt=time_format,
                                                           log_colors=log_colors))
            console.setLevel(level)
            self._add(console)
        if conf.get("logger", "save_log"):
            if not os.path.exists(save_path):
                os.makedirs(save_path, 0o755)
            log_name = "server_%s.log" % time.strftime("%y%m%d")
            f_handler = logging.FileHandler(os.path.join(work_directory, save_path, log_name))
            f_handler.setFormatter(logging.Formatter(log_format, time_format))
            f_handler.setLevel(logging.INFO)
            self._add(f_handler)

    def _add(self, handler):
        self.logger.addHandler(handler)
        self._handlers.append(handler)

    def get_logger(self):
        return self.logger


main_logger = Logger()
