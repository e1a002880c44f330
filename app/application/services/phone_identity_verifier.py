"""Phone-proof token verification (claims only).

The proof is an ID token from the phone-verification provider (Firebase
phone auth). Claims are checked in a fixed order and the first failure is
returned with a user-presentable message.

The token signature is NOT verified against the issuer's public keys.
This is a known trust gap: a caller able to forge a well-formed token can
claim any phone. Closing it requires fetching and caching the issuer's
signing keys (jose.jwt.decode with the JWKS) and is tracked as design debt.
"""

from __future__ import annotations

import logging
from datetime import datetime, timedelta

from jose import JWTError, jwt

from app.application.dtos.phone import PhoneVerificationResult
from app.core.config import get_settings
from app.core.messages import translate
from app.domain.exceptions import PhoneVerificationException
from app.shared.utils.datetime import from_timestamp_utc, utc_now

logger = logging.getLogger(__name__)


class PhoneIdentityVerifier:
    """Validate phone-proof token claims against the expected issuer, audience and phone."""

    def __init__(
        self,
        project_id: str,
        issuer: str,
        clock_skew: timedelta = timedelta(seconds=60),
    ) -> None:
        self.project_id = project_id
        self.issuer = issuer
        self.clock_skew = clock_skew

    def _fail(self, key: str, reason: str) -> PhoneVerificationResult:
        logger.info("Phone proof rejected: %s", reason)
        return PhoneVerificationResult(valid=False, error=translate(key))

    def verify(
        self,
        token: str,
        expected_phone: str,
        now: datetime | None = None,
    ) -> PhoneVerificationResult:
        """Check token claims in order; first failure wins.

        Order: structure, exp, iat skew, iss, aud, phone_number present,
        phone_number equals expected_phone.
        """
        now = now or utc_now()
        if not token or token.count(".") != 2:
            return self._fail("phone_token_malformed", "structure")
        try:
            claims = jwt.get_unverified_claims(token)
        except JWTError:
            return self._fail("phone_token_malformed", "payload")
        if not isinstance(claims, dict):
            return self._fail("phone_token_malformed", "payload_not_object")

        exp = claims.get("exp")
        if not isinstance(exp, (int, float)) or from_timestamp_utc(exp) <= now:
            return self._fail("phone_token_expired", "exp")

        iat = claims.get("iat")
        if isinstance(iat, (int, float)) and from_timestamp_utc(iat) > now + self.clock_skew:
            return self._fail("phone_token_future", "iat")

        if claims.get("iss") != self.issuer:
            return self._fail("phone_token_issuer", "iss")

        if claims.get("aud") != self.project_id:
            return self._fail("phone_token_audience", "aud")

        phone_number = claims.get("phone_number")
        if not phone_number:
            return self._fail("phone_token_no_phone", "phone_number_missing")

        if phone_number != expected_phone:
            return self._fail("phone_token_mismatch", "phone_number_mismatch")

        return PhoneVerificationResult(valid=True, phone_number=phone_number)

    def require(self, token: str, expected_phone: str) -> str:
        """Verify and return the proven phone number.

        Raises:
            PhoneVerificationException: With the specific failure message.
        """
        result = self.verify(token, expected_phone)
        if not result.valid:
            raise PhoneVerificationException(result.error or translate("phone_token_malformed"))
        return result.phone_number or expected_phone


def get_phone_identity_verifier() -> PhoneIdentityVerifier:
    settings = get_settings()
    return PhoneIdentityVerifier(
        project_id=settings.phone_auth_project_id,
        issuer=settings.phone_auth_issuer,
        clock_skew=timedelta(seconds=settings.phone_auth_clock_skew_seconds),
    )
