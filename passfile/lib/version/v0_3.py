"""v0.3: Argon2id key, salted AES-CBC values."""
from __future__ import annotations
from typing import Optional
from .. import crypto
from ..model import ValueKind
from .common import Keyed

VERSION_STR = 'v0.3'

class Store(Keyed):
	VERSION = VERSION_STR
	VALUE_TAGS = {ValueKind.BASIC: 'Basic', ValueKind.PROTECTED: 'Protected'}

	@staticmethod
	def hash_key(salt: Optional[str], password: str) -> bytes:
		return crypto.hash_key_argon2(salt, password)

	@staticmethod
	def encrypt(data: bytes, iv: bytes, key: bytes) -> bytes:
		return crypto.encrypt_salted(data, iv, key)

	@staticmethod
	def decrypt(data: bytes, iv: bytes, key: bytes) -> Optional[bytes]:
		return crypto.decrypt_salted(data, iv, key)

	def to_next(self, password: str) -> Keyed:
		from . import v0_4
		return v0_4.Store.from_plaintext(password, self.to_plaintext())
