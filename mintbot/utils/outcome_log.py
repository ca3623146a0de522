# -*- coding: utf-8 -*-

import datetime
import logging

from .common_util import ensure_parent_dir
from .datetime_util import get_current_isostr, datetime2isostr, timestamp2isostr


logger = logging.getLogger(__name__)


def _one_line(text):
    return " ".join(str(text).split())


class OutcomeLogger(object):
    """Append-only audit trail: one file for successes, one for failures."""

    def __init__(self, success_path="mint_success.log", failure_path="mint_error.log"):
        self.success_path = success_path
        self.failure_path = failure_path


    @staticmethod
    def _timestamp(timestamp):
        if timestamp is None:
            return get_current_isostr()
        if isinstance(timestamp, datetime.datetime):
            return datetime2isostr(timestamp)
        if isinstance(timestamp, (int, float)):
            return timestamp2isostr(timestamp)
        return str(timestamp)


    @staticmethod
    def format_line(outcome, timestamp):
        if outcome.ok:
            detail = f"Tx: {outcome.tx_hash} Block: {outcome.block_number} GasUsed: {outcome.gas_used}"
            return f"{timestamp} - Mint successful - {detail}"
        return f"{timestamp} - Mint failed - Error: {_one_line(outcome.reason)}"


    def record(self, outcome, timestamp=None) -> str:
        path = self.success_path if outcome.ok else self.failure_path
        line = self.format_line(outcome, self._timestamp(timestamp))
        ensure_parent_dir(path)
        with open(path, "a", encoding="utf-8") as f:
            f.write(line + "\n")
        logger.debug(f"Outcome Recorded[{path}][{line}]")
        return line
