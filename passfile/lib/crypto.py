"""Cryptographic utilities (key derivation + AES-256-CBC + salted values)."""
from __future__ import annotations
import base64, hashlib, secrets
from typing import Optional
from argon2.low_level import hash_secret_raw, Type as Argon2Type
from cryptography.hazmat.primitives import padding
from cryptography.hazmat.primitives.ciphers import Cipher, algorithms, modes
from cryptography.hazmat.backends import default_backend
from passfile.config import settings
from .errors import EncryptError, BadCrypt, BadUtf8

_backend = default_backend()

def generate_iv() -> bytes:
	return secrets.token_bytes(settings.IV_LENGTH)

def generate_kdf_salt() -> str:
	"""Random Argon2 salt, stored as unpadded base64 text."""
	return base64.b64encode(secrets.token_bytes(settings.KDF_SALT_BYTES)).decode('ascii').rstrip('=')

def decode_kdf_salt(salt: str) -> bytes:
	return base64.b64decode(salt + '=' * (-len(salt) % 4))

def hash_key_sha256(password: str) -> bytes:
	"""Key derivation of the oldest format: a bare, unsalted SHA-256."""
	return hashlib.sha256(password.encode('utf-8')).digest()

def hash_key_argon2(salt: str, password: str) -> bytes:
	return hash_secret_raw(
		secret=password.encode('utf-8'),
		salt=decode_kdf_salt(salt),
		time_cost=settings.ARGON2_TIME_COST,
		memory_cost=settings.ARGON2_MEMORY_COST,
		parallelism=settings.ARGON2_PARALLELISM,
		hash_len=settings.KEY_LENGTH,
		type=Argon2Type.ID,
	)

def _cipher(iv: bytes, key: bytes) -> Cipher:
	if len(key) != settings.KEY_LENGTH: raise EncryptError('Bad key length')
	if len(iv) != settings.IV_LENGTH: raise EncryptError('Bad IV length')
	return Cipher(algorithms.AES(key), modes.CBC(iv), backend=_backend)

def encrypt(data: bytes, iv: bytes, key: bytes) -> bytes:
	"""AES-256-CBC with PKCS7 padding."""
	padder = padding.PKCS7(algorithms.AES.block_size).padder()
	padded = padder.update(data) + padder.finalize()
	enc = _cipher(iv, key).encryptor()
	return enc.update(padded) + enc.finalize()

def decrypt(data: bytes, iv: bytes, key: bytes) -> Optional[bytes]:
	"""Inverse of :func:`encrypt`; ``None`` when the length or padding is invalid."""
	dec = _cipher(iv, key).decryptor()
	if not data or len(data) % settings.IV_LENGTH: return None
	padded = dec.update(data) + dec.finalize()
	unpadder = padding.PKCS7(algorithms.AES.block_size).unpadder()
	try:
		return unpadder.update(padded) + unpadder.finalize()
	except ValueError:
		return None

def salt_length_for(size: int) -> int:
	"""Pick a random salt length so that salt + value is at least SALT_MAX_LENGTH bytes."""
	lo = max(settings.SALT_MIN_LENGTH, settings.SALT_MAX_LENGTH - size)
	return lo + secrets.randbelow(settings.SALT_MAX_LENGTH - lo + 1)

def encrypt_salted(data: bytes, iv: bytes, key: bytes) -> bytes:
	salt = secrets.token_bytes(salt_length_for(len(data)))
	return encrypt_with_salt(data, salt, iv, key)

def encrypt_with_salt(data: bytes, salt: bytes, iv: bytes, key: bytes) -> bytes:
	"""Encrypt ``salt + data``, recording the salt length in the low nibble of its first byte."""
	if not settings.SALT_MIN_LENGTH <= len(salt) <= settings.SALT_MAX_LENGTH:
		raise ValueError(f'Salt length {len(salt)} out of range')
	salt = bytearray(salt)
	salt[0] = (salt[0] & 0xF0) | (len(salt) - settings.SALT_MIN_LENGTH)
	return encrypt(bytes(salt) + data, iv, key)

def decrypt_salted(data: bytes, iv: bytes, key: bytes) -> Optional[bytes]:
	full = decrypt(data, iv, key)
	if not full: return None
	salt_len = (full[0] & 0x0F) + settings.SALT_MIN_LENGTH
	# A wrong key can still leave valid padding; too little data means the salt is bogus
	if len(full) < salt_len: return None
	return full[salt_len:]

def to_text(data: Optional[bytes]) -> str:
	if data is None: raise BadCrypt()
	try:
		return data.decode('utf-8')
	except UnicodeDecodeError:
		raise BadUtf8() from None
