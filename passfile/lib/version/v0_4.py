"""v0.4 (current): v0.3 crypto plus TOTP values and lowercase value tags."""
from __future__ import annotations
from ..model import ValueKind
from .v0_3 import Store as _V03

VERSION_STR = 'v0.4'

class Store(_V03):
	VERSION = VERSION_STR
	SUPPORTS_TOTP = True
	VALUE_TAGS = {ValueKind.BASIC: 'basic', ValueKind.PROTECTED: 'protected', ValueKind.TOTP: 'totp'}

	def to_next(self, password: str) -> 'Store':
		return self
