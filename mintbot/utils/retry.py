# -*- coding: utf-8 -*-

import json
import time
import random
import logging
import asyncio
import functools


logging_logger = logging.getLogger(__name__)


def next_delay(delay, backoff=1, jitter=0, max_delay=None):
    delay = delay * backoff + (random.uniform(*jitter) if isinstance(jitter, tuple) else jitter)
    if max_delay is not None:
        delay = min(delay, max_delay)
    return delay


def _call_name(run, args, kwargs):
    return f"[{run.__name__}](args:{json.dumps(args, default=str)}, kwargs:{json.dumps(kwargs, default=str)})"


def _pop_options(kwargs):
    return {
        "tries": kwargs.pop("tries", -1),
        "delay": kwargs.pop("delay", 0),
        "jitter": kwargs.pop("jitter", 0),
        "backoff": kwargs.pop("backoff", 1),
        "max_delay": kwargs.pop("max_delay", None),
        "exceptions": kwargs.pop("exceptions", Exception),
        "logger": kwargs.pop("logger", logging_logger),
    }


def retry_call(run, *args, **kwargs):
    opts = _pop_options(kwargs)
    tries, delay = opts["tries"], opts["delay"]

    attempt = 1
    while tries:
        try:
            return run(*args, **kwargs)
        except opts["exceptions"] as e:
            tries -= 1
            if not tries:
                raise
            opts["logger"].warning(
                "[%s]%s, retrying[%s] in %s seconds...",
                type(e).__name__, _call_name(run, args, kwargs), attempt, delay)
            time.sleep(delay)
            delay = next_delay(delay, opts["backoff"], opts["jitter"], opts["max_delay"])
            attempt += 1


async def async_retry_call(run, *args, **kwargs):
    opts = _pop_options(kwargs)
    tries, delay = opts["tries"], opts["delay"]

    attempt = 1
    while tries:
        try:
            return await run(*args, **kwargs)
        except opts["exceptions"] as e:
            tries -= 1
            if not tries:
                raise
            opts["logger"].warning(
                "[%s]%s, retrying[%s] in %s seconds...",
                type(e).__name__, _call_name(run, args, kwargs), attempt, delay)
            await asyncio.sleep(delay)
            delay = next_delay(delay, opts["backoff"], opts["jitter"], opts["max_delay"])
            attempt += 1


def retry(exceptions=Exception, tries=-1, delay=0, max_delay=None, backoff=1, jitter=0, logger=logging_logger):
    """Retry the wrapped callable. ``tries=-1`` retries forever."""
    retry_kwargs = {
        "exceptions": exceptions, "tries": tries, "delay": delay, "max_delay": max_delay,
        "backoff": backoff, "jitter": jitter, "logger": logger,
    }

    def retry_decorator(f):
        @functools.wraps(f)
        def wrapper(*args, **kwargs):
            return retry_call(f, *args, **kwargs, **retry_kwargs)

        @functools.wraps(f)
        async def async_wrapper(*args, **kwargs):
            return await async_retry_call(f, *args, **kwargs, **retry_kwargs)
        return async_wrapper if asyncio.iscoroutinefunction(f) else wrapper

    return retry_decorator
