"""
AWS profile and session names used by the providers
"""

# std
import os
from typing import Union

PROFILE: Union[str, None] = None
SESSION: Union[str, None] = None


def set_profile(profile: str):
    """
    Set the AWS profile the providers authenticate with
    """
    global PROFILE
    PROFILE = profile


def get_profile() -> Union[str, None]:
    """
    Return the AWS profile, falling back to AWS_PROFILE
    """
    return PROFILE or os.environ.get("AWS_PROFILE")


def set_session(session: str):
    """
    Set the trackable session name used when assuming roles
    """
    global SESSION
    SESSION = session


def get_session() -> str:
    """
    Return the session name, falling back to STACKKIT_SESSION
    """
    return SESSION or os.environ.get("STACKKIT_SESSION", "stackkit")
