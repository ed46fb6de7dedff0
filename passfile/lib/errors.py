"""Errors raised by the storage engine.

Password-dependent failures (``DecryptError``) are always recoverable by
asking for the password again. ``ContentsNotUnlocked`` means an operation
needed the derived key before one was supplied.
"""
from __future__ import annotations
from typing import Optional

class PassfileError(Exception): ...

class EncryptError(PassfileError):
	"""Cipher setup failed (bad key or IV length)."""
	def __init__(self, msg: str = 'Encryption failed'):
		super().__init__(msg)

class DecryptError(PassfileError): ...

class BadCrypt(DecryptError):
	def __init__(self, msg: str = 'Decryption failed'):
		super().__init__(msg)

class BadUtf8(DecryptError):
	def __init__(self, msg: str = 'Decryption result gave non UTF-8 bytes (likely incorrect key?)'):
		super().__init__(msg)

class UnsupportedFeature(PassfileError):
	def __init__(self, feature: str = 'totp'):
		self.feature = feature
		super().__init__('TOTP values are not supported with your current file version')

class ContentsNotUnlocked(PassfileError):
	def __init__(self, kind: Optional[object] = None):
		self.kind = kind
		if kind is None:
			super().__init__('Contents have not been decrypted')
		else:
			super().__init__(f'Cannot set {kind} field: contents have not been decrypted')

class BadTotpSecret(PassfileError):
	def __init__(self, msg: str = 'This field has an invalid TOTP secret'):
		super().__init__(msg)

class IsTotp(PassfileError):
	def __init__(self, msg: str = 'Encryption cannot be disabled on TOTP fields'):
		super().__init__(msg)

class ParseError(PassfileError): ...

class StorageError(PassfileError): ...
