"""Project configuration settings.

Constants shared by the storage engine and the CLI. The cryptographic
parameters must match between write and read, so they are not exposed
as user settings.
"""

from pathlib import Path
import os

# Security / crypto
KEY_LENGTH = 32  # AES-256
IV_LENGTH = 16   # AES block size
SALT_MIN_LENGTH = 17  # per-value salt bounds (salted codec)
SALT_MAX_LENGTH = 32
KDF_SALT_BYTES = 16  # random bytes behind the stored Argon2 salt string

# Argon2id cost parameters (v0.3+)
ARGON2_TIME_COST = 5
ARGON2_MEMORY_COST = 1_000_000  # KiB, ~1GB
ARGON2_PARALLELISM = 1

# Plaintext of the password-check token
ENCRYPT_TOKEN = "encryption token ☺".encode('utf-8')

# TOTP
TOTP_PERIOD = 30
TOTP_DIGITS = 6

# Store
DEFAULT_STORE_PATH = Path(os.environ.get("PASSFILE_PATH", "passfile.yml"))
TMP_SUFFIX = ".tmp"

# Logging
LOG_LEVEL = "WARNING"

__all__ = [
	'KEY_LENGTH','IV_LENGTH','SALT_MIN_LENGTH','SALT_MAX_LENGTH','KDF_SALT_BYTES',
	'ARGON2_TIME_COST','ARGON2_MEMORY_COST','ARGON2_PARALLELISM','ENCRYPT_TOKEN',
	'TOTP_PERIOD','TOTP_DIGITS','DEFAULT_STORE_PATH','TMP_SUFFIX','LOG_LEVEL'
]
