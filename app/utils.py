# -*- coding: utf-8 -*-
# Time       : 2023/8/19 17:19
# Author     : QIN2DIM
# GitHub     : https://github.com/QIN2DIM
# Description: loguru sinks for the translation bot
from __future__ import annotations

import sys
from pathlib import Path
from zoneinfo import ZoneInfo

from loguru import logger

STDOUT_FORMAT = (
    "<g>{time:YYYY-MM-DD HH:mm:ss}</g> | "
    "<lvl>{level:<8}</lvl>    | "
    "<c>{name}</c>:<c>{function}</c>:<c>{line}</c> | "
    "<n>{message}</n>"
)

PERSISTENT_FORMAT = (
    "<g>{time:YYYY-MM-DD HH:mm:ss}</g> | "
    "<lvl>{level}</lvl>    | "
    "<c><u>{name}</u></c>:{function}:{line} | "
    "{message} - "
    "{extra}"
)


def make_timezone_filter(timezone: str):
    zone = ZoneInfo(timezone)

    def _filter(record):
        record["time"] = record["time"].astimezone(zone)
        return record

    return _filter


def init_log(log_dir: Path, *, level: str = "DEBUG", timezone: str = "UTC"):
    """Log to stdout plus rotating runtime, error and serialized files under `log_dir`.

    Message text is logged at DEBUG only, keep the level at INFO or above
    where chat content must not reach the files.
    """
    tz_filter = make_timezone_filter(timezone)

    logger.remove()
    logger.add(
        sink=sys.stdout,
        colorize=True,
        level=level.upper(),
        format=STDOUT_FORMAT,
        diagnose=False,
        filter=tz_filter,
    )

    file_sinks = {
        "runtime.log": {"level": level.upper(), "rotation": "5 MB", "retention": "7 days"},
        "error.log": {"level": "ERROR", "rotation": "5 MB", "retention": "7 days"},
        "serialize.log": {"level": level.upper(), "format": PERSISTENT_FORMAT, "serialize": True},
    }
    for filename, options in file_sinks.items():
        logger.add(
            sink=log_dir.joinpath(filename),
            encoding="utf8",
            diagnose=False,
            filter=tz_filter,
            **options,
        )

    return logger
