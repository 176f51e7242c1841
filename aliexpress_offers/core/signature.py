"""Request signing for the affiliate sync API."""
import hashlib
import hmac
from typing import Dict


def generate_api_signature(params: Dict[str, str], secret: str) -> str:
    """
    Sign a parameter set the way the affiliate API expects.

    Keys are sorted lexicographically and each ``key + value`` pair is
    concatenated with no separator. The result is HMAC-SHA256 over that
    string keyed with ``secret``, rendered as uppercase hex.

    Args:
        params: Request parameters, excluding ``sign`` itself.
        secret: The caller's app secret.

    Returns:
        Uppercase hexadecimal signature.
    """
    payload = "".join(f"{key}{params[key]}" for key in sorted(params))
    digest = hmac.new(secret.encode("utf-8"), payload.encode("utf-8"), hashlib.sha256)
    return digest.hexdigest().upper()
