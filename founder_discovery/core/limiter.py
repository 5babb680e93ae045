from slowapi import Limiter
from slowapi.util import get_remote_address

# Per client IP; there is no auth on this API
limiter = Limiter(key_func=get_remote_address)
