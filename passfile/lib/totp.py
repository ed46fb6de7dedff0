"""Time-based one-time codes for TOTP fields.

The engine does not schedule anything itself: callers get the seconds left in
the current time slice and decide when to re-render.
"""
from __future__ import annotations
import binascii, time
from dataclasses import dataclass
from typing import Optional
import pyotp
from passfile.config import settings
from .errors import BadTotpSecret

@dataclass(frozen=True)
class TotpCode:
	code: str
	secs_remaining: int

	def __str__(self) -> str:
		return f'{self.code}  (00:{self.secs_remaining:02} remaining)'

def unix_seconds(now: Optional[float] = None) -> int:
	return int(time.time() if now is None else now)

def seconds_remaining(now: Optional[float] = None) -> int:
	return settings.TOTP_PERIOD - unix_seconds(now) % settings.TOTP_PERIOD

def time_slice(now: Optional[float] = None) -> int:
	return unix_seconds(now) // settings.TOTP_PERIOD

def current_code(secret: str, now: Optional[float] = None) -> TotpCode:
	"""Compute the code for ``secret`` (base32) at ``now`` (defaults to the current time)."""
	if not secret.strip(): raise BadTotpSecret()
	ts = unix_seconds(now)
	otp = pyotp.TOTP(secret, digits=settings.TOTP_DIGITS, interval=settings.TOTP_PERIOD)
	try:
		code = otp.generate_otp(time_slice(ts))
	except (binascii.Error, ValueError):
		raise BadTotpSecret() from None
	return TotpCode(code, seconds_remaining(ts))
