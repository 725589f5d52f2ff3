"""
Errors raised while declaring constructs
"""


class ContextNotSet(Exception):
    """
    A resource was declared outside of an Account/Region context
    """


class ConfigurationError(ValueError):
    """
    The requested construct configuration can't be expressed safely
    """
