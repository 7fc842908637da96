"""Custom exceptions for the pricecorr package."""


class PriceCorrError(Exception):
    """Base exception for pricecorr errors."""
    pass


class DataError(PriceCorrError):
    """Raised when price data is missing, invalid, or could not be downloaded."""
    pass
