"""
Bearer token verification.

Tokens are issued elsewhere; this service only verifies them and maps
the ``sub`` claim to a principal.
"""
from typing import Optional, Dict, Any
import logging

from jose import jwt, JWTError, ExpiredSignatureError

from ...exceptions import UnauthorizedError
from .principal import Principal

logger = logging.getLogger(__name__)


class TokenValidator:
    """Verifies signed JWTs with a shared secret."""
    
    def __init__(
        self,
        secret_key: str,
        algorithm: str = "HS256",
        audience: Optional[str] = None
    ):
        self.secret_key = secret_key
        self.algorithm = algorithm
        self.audience = audience
    
    def decode(self, token: str) -> Dict[str, Any]:
        """Verify signature, expiry and (when configured) audience."""
        decode_params = {
            "token": token,
            "key": self.secret_key,
            "algorithms": [self.algorithm],
            "options": {"verify_aud": self.audience is not None},
        }
        if self.audience:
            decode_params["audience"] = self.audience
        
        try:
            return jwt.decode(**decode_params)
        except ExpiredSignatureError:
            raise UnauthorizedError("Token has expired")
        except JWTError as e:
            logger.warning(f"Invalid token: {e}")
            raise UnauthorizedError("Invalid token")
    
    def validate(self, token: str) -> Principal:
        """Decode a token and build the principal it names."""
        claims = self.decode(token)
        
        subject = claims.get("sub")
        if not subject:
            raise UnauthorizedError("Token has no subject")
        
        return Principal(
            id=str(subject),
            username=claims.get("preferred_username") or claims.get("username"),
            claims=claims
        )
