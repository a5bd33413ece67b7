class ConfigurationError(Exception):
    """Raised for malformed settlement input (bad pair, amount or headcount)"""


class InternalInvariantViolation(Exception):
    """Raised when an optimized settlement no longer balances"""
