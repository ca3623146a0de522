#coding=utf-8


import datetime
import pytz


ISO_FMT = "%Y-%m-%dT%H:%M:%S"


def get_current_utc_datetime():
    return datetime.datetime.now(pytz.utc)


def datetime2str(dt, fm="%Y%m%d"):
    return dt.strftime(fm)


def datetime2isostr(dt):
    # millisecond precision, UTC, trailing Z
    if dt.tzinfo is None:
        dt = pytz.utc.localize(dt)
    else:
        dt = dt.astimezone(pytz.utc)
    return f"{datetime2str(dt, ISO_FMT)}.{dt.microsecond // 1000:03d}Z"


def get_current_isostr():
    return datetime2isostr(get_current_utc_datetime())


def timestamp2isostr(timestamp, ms=False):
    if isinstance(timestamp, str):
        timestamp = int(timestamp)
    if ms:
        timestamp /= 1000
    return datetime2isostr(datetime.datetime.fromtimestamp(timestamp, pytz.utc))
