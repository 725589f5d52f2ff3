from .account import Account
from .region import Region
from .session import set_profile, get_profile, set_session, get_session
