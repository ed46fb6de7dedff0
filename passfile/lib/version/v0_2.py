"""v0.2: SHA-256 key, plain AES-CBC values. Deprecated; load-and-upgrade only."""
from __future__ import annotations
from typing import Optional
from .. import crypto
from ..model import FormatWarning, ValueKind
from .common import Keyed

VERSION_STR = 'v0.2'
WARNING = FormatWarning('v0.2 is deprecated for security reasons')

class Store(Keyed):
	VERSION = VERSION_STR
	WARNING = WARNING
	HAS_SALT = False
	VALUE_TAGS = {ValueKind.BASIC: 'Basic', ValueKind.PROTECTED: 'Protected'}

	@staticmethod
	def hash_key(salt: Optional[str], password: str) -> bytes:
		return crypto.hash_key_sha256(password)

	@staticmethod
	def encrypt(data: bytes, iv: bytes, key: bytes) -> bytes:
		return crypto.encrypt(data, iv, key)

	@staticmethod
	def decrypt(data: bytes, iv: bytes, key: bytes) -> Optional[bytes]:
		return crypto.decrypt(data, iv, key)

	def to_next(self, password: str) -> Keyed:
		from . import v0_3
		return v0_3.Store.from_plaintext(password, self.to_plaintext())
