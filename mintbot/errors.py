# -*- coding: utf-8 -*-


class MintBotError(Exception):
    pass


class FatalError(MintBotError):
    """Setup or precondition failure, the process must stop."""


class ConfigError(FatalError):
    pass


class NetworkError(MintBotError):
    """Transient read failure, callers treat it as "not ready yet"."""


class SubmissionError(MintBotError):
    pass


class ConfirmationError(MintBotError):
    pass


class DuplicateSubmissionError(MintBotError):
    pass


class BudgetExhausted(MintBotError):
    pass
