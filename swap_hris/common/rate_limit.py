"""Rate limiting configuration using slowapi.

The limiter is wired into the app in main.py; the dashboard router uses it
to throttle snapshot refreshes, which hit every upstream source at once.
"""

from slowapi import Limiter
from slowapi.util import get_remote_address

limiter = Limiter(
    key_func=get_remote_address,
    default_limits=["120/minute"],
)
