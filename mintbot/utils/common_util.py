#! -*- coding: utf8 -*-
import os
import sys
import logging
import logging.handlers


DEFAULT_FMT = "%(asctime)s [%(levelname)s] (%(process)d:%(threadName)s) [%(module)s:%(lineno)d] %(message)s"


def init_logging(filename=None, level=logging.INFO, days=7, fmt=DEFAULT_FMT):
    if isinstance(level, str):
        name, level = level, logging.getLevelName(level.upper())
        if not isinstance(level, int):
            raise ValueError(f"Unknown Log Level[{name}]")

    handlers = [logging.StreamHandler(sys.stdout)]
    if filename:
        dirname = os.path.dirname(filename)
        if dirname and not os.path.exists(dirname):
            os.makedirs(dirname)
        handlers.append(logging.handlers.TimedRotatingFileHandler(
            filename, when="MIDNIGHT", backupCount=days, interval=1
        ))
    logging.basicConfig(level=level, format=fmt, handlers=handlers, force=True)


def ensure_parent_dir(path):
    dirname = os.path.dirname(os.fspath(path))
    if dirname and not os.path.exists(dirname):
        os.makedirs(dirname, exist_ok=True)
