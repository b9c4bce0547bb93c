"""
HMAC verification for GitHub webhook deliveries.
"""

import hashlib
import hmac
from typing import Optional, Union

SIGNATURE_SCHEME = "sha256="


def compute_signature(body: bytes, secret: Union[str, bytes]) -> str:
    """
    Compute the ``X-Hub-Signature-256`` value GitHub sends for ``body``.
    :param body: Raw request body, exactly as received.
    :param secret: Shared webhook secret.
    :return: The signature, prefixed with ``sha256=``.
    """
    key = secret.encode() if isinstance(secret, str) else secret
    digest = hmac.new(key, msg=body, digestmod=hashlib.sha256).hexdigest()
    return f"{SIGNATURE_SCHEME}{digest}"


def verify_signature(
    body: bytes, signature: Optional[str], secret: Union[str, bytes]
) -> bool:
    """
    Check a delivery's signature header against the shared secret.

    The comparison is constant-time and never raises, including when the
    supplied value has a different length or contains non-ASCII characters.

    :param body: Raw request body. Must not be a re-serialized JSON document.
    :param signature: Value of the ``X-Hub-Signature-256`` header, if any.
    :param secret: Shared webhook secret.
    :return: True if the signature matches.
    """
    if not signature:
        return False

    expected = compute_signature(body, secret).encode()
    return hmac.compare_digest(expected, signature.encode("utf-8", "surrogateescape"))
