"""Encoding helpers shared by the on-disk and plaintext formats."""
from __future__ import annotations
import base64, binascii
from typing import Any, Dict
from .errors import ParseError
from .model import Timestamp

def now() -> Timestamp:
	return Timestamp.now()

def b64encode(data: bytes) -> str:
	return base64.b64encode(data).decode('ascii')

def b64decode(text: Any, what: str = 'value') -> bytes:
	if not isinstance(text, str): raise ParseError(f'{what}: expected a base64 string')
	try:
		return base64.b64decode(text, validate=True)
	except (binascii.Error, ValueError) as e:
		raise ParseError(f'{what}: invalid base64 ({e})') from None

def dump_time(t: Timestamp) -> Dict[str, int]:
	"""Timestamps are stored as seconds + nanoseconds since the Unix epoch."""
	return {'secs_since_epoch': t.secs, 'nanos_since_epoch': t.nanos}

def load_time(raw: Any, what: str = 'timestamp') -> Timestamp:
	if not isinstance(raw, dict): raise ParseError(f'{what}: expected a mapping')
	secs = raw.get('secs_since_epoch'); nanos = raw.get('nanos_since_epoch', 0)
	if not isinstance(secs, int) or not isinstance(nanos, int) or secs < 0 or not 0 <= nanos < 10**9:
		raise ParseError(f'{what}: malformed timestamp')
	return Timestamp(secs, nanos)

def require(raw: Dict[str, Any], key: str, kind: type, what: str) -> Any:
	if key not in raw: raise ParseError(f'{what}: missing "{key}"')
	val = raw[key]
	if not isinstance(val, kind): raise ParseError(f'{what}: "{key}" has the wrong type')
	return val

def string_list(raw: Any, what: str) -> list:
	if not isinstance(raw, list) or not all(isinstance(s, str) for s in raw):
		raise ParseError(f'{what}: expected a list of strings')
	return list(raw)
