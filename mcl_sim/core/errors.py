"""
Exceptions raised by the localization core
"""


class MCLError(Exception):
    """Base class for localization core errors"""


class InvalidParameter(MCLError, ValueError):
    """A distribution or noise stage was configured with unusable parameters"""


class InvalidControl(MCLError, ValueError):
    """A control input (dt, nu, omega, radius) is non-finite or out of range"""
