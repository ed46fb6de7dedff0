"""In-memory data model shared by every file format generation."""
from __future__ import annotations
import time
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from enum import Enum
from typing import List, Optional, Union

@dataclass(frozen=True, order=True)
class Timestamp:
	"""Seconds and nanoseconds since the Unix epoch, kept exactly as stored."""
	secs: int
	nanos: int = 0

	@classmethod
	def now(cls) -> 'Timestamp':
		ns = time.time_ns()
		return cls(ns // 10**9, ns % 10**9)

	def to_datetime(self) -> datetime:
		return datetime.fromtimestamp(self.secs, timezone.utc) + timedelta(microseconds=self.nanos // 1000)

class ValueKind(Enum):
	BASIC = 'basic'
	PROTECTED = 'protected'
	TOTP = 'totp'

	def __str__(self) -> str:
		return self.value

@dataclass
class Basic:
	value: str

@dataclass
class Protected:
	ciphertext: bytes

@dataclass
class Totp:
	issuer: str
	secret: bytes  # encrypted base32 seed

Value = Union[Basic, Protected, Totp]

def kind_of(value: Value) -> ValueKind:
	if isinstance(value, Basic): return ValueKind.BASIC
	if isinstance(value, Protected): return ValueKind.PROTECTED
	return ValueKind.TOTP

@dataclass
class Field:
	name: str
	value: Value

@dataclass
class Entry:
	name: str
	tags: List[str]
	fields: List[Field]
	first_added: Timestamp
	last_update: Timestamp

@dataclass
class Content:
	"""Everything stored in one file. ``salt`` is None for formats without a salted KDF."""
	version: str
	token: bytes
	iv: bytes
	salt: Optional[str]
	last_update: Timestamp
	inner: List[Entry] = field(default_factory=list)

@dataclass(frozen=True)
class FormatWarning:
	reason: str

	def __str__(self) -> str:
		return f'Warning: {self.reason}. Run `passfile update INPUT OUTPUT` to upgrade the file.'
