import hashlib
import hmac

from .canonical import RequestDescriptor, canonical_request_digest, signed_headers
from .credentials import Credential
from .exceptions import EncodingError

ALGORITHM = 'SDK-HMAC-SHA256'


def string_to_sign(timestamp: str, digest: str) -> str:
    return '\n'.join([ALGORITHM, timestamp, digest])


def sign(credential: Credential, timestamp: str, digest: str) -> str:
    """HMAC-SHA256 of the string-to-sign, keyed with the secret key, as lowercase hex."""
    try:
        key = credential.secret_key.encode('utf-8')
        message = string_to_sign(timestamp, digest).encode('utf-8')
    except (AttributeError, TypeError, UnicodeError) as e:
        raise EncodingError(f"cannot encode signing input: {e}") from e
    return hmac.new(key, message, hashlib.sha256).hexdigest()


def authorization_value(access_key: str, signed_header_list: str, signature: str) -> str:
    # IoTDA rebuilds this string byte for byte: note ", " after Access and "," after SignedHeaders
    return (f"{ALGORITHM} Access={access_key}, "
            f"SignedHeaders={signed_header_list},"
            f"Signature={signature}")


class SDKSigner:
    """Signs request descriptors with an AK/SK credential."""

    def __init__(self, credential: Credential):
        self.credential = credential

    def sign_descriptor(self, request: RequestDescriptor, timestamp: str) -> str:
        """
        Return the Authorization header value for `request`.
        - request: descriptor whose headers already carry X-Sdk-Date
        - timestamp: the X-Sdk-Date value
        """
        self.credential.validate()
        digest = canonical_request_digest(request)
        signature = sign(self.credential, timestamp, digest)
        return authorization_value(self.credential.access_key, signed_headers(request.headers), signature)
