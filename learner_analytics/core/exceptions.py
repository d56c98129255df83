"""
Analytics exceptions

Expected conditions (missing data, disabled analytics, malformed samples)
never raise; only corrupted internal state does.
"""


class AnalyticsError(Exception):
    """Base class for analytics engine errors"""
    pass


class ProfileInvariantError(AnalyticsError):
    """Learning-style weight vector could not be renormalized"""
    pass
