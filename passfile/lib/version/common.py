"""Keyed container and the concrete accessor views shared by all format generations.

A format generation subclasses :class:`Keyed` and fills in its version tag,
its key derivation, its value encryption and the tags used for values on
disk. Everything else (entry/field editing, plaintext conversion, YAML
layout) is common.
"""
from __future__ import annotations
import logging
from abc import abstractmethod
from typing import Any, ClassVar, Dict, List, Optional
import yaml
from passfile.config import settings
from .. import crypto
from ..accessors import EntryMut, EntryRef, FieldBuilder, FieldMut, FieldRef, FileContent
from ..errors import ContentsNotUnlocked, BadCrypt, IsTotp, ParseError, UnsupportedFeature
from ..model import Basic, Content, Entry, Field, FormatWarning, Protected, Timestamp, Totp, Value, ValueKind, kind_of
from ..plaintext import ManualValue, PlaintextContent, PlaintextEntry, PlaintextField, PlaintextValue, TotpValue
from .. import totp
from ..utils import b64decode, b64encode, dump_time, load_time, now, require, string_list

log = logging.getLogger(__name__)


class Keyed(FileContent):
	"""Owns one :class:`Content`, the derived key (None until unlocked) and the unsaved flag."""

	VERSION: ClassVar[str]
	WARNING: ClassVar[Optional[FormatWarning]] = None
	HAS_SALT: ClassVar[bool] = True
	SUPPORTS_TOTP: ClassVar[bool] = False
	# on-disk tag for each value kind
	VALUE_TAGS: ClassVar[Dict[ValueKind, str]]

	def __init__(self, content: Content):
		self.content = content
		self.key: Optional[bytes] = None
		self._unsaved = False

	# --- per-generation crypto -------------------------------------------------

	@classmethod
	def new_salt(cls) -> Optional[str]:
		return crypto.generate_kdf_salt() if cls.HAS_SALT else None

	@staticmethod
	@abstractmethod
	def hash_key(salt: Optional[str], password: str) -> bytes: ...

	@staticmethod
	@abstractmethod
	def encrypt(data: bytes, iv: bytes, key: bytes) -> bytes: ...

	@staticmethod
	@abstractmethod
	def decrypt(data: bytes, iv: bytes, key: bytes) -> Optional[bytes]: ...

	@abstractmethod
	def to_next(self, password: str) -> 'Keyed':
		"""Re-encode into the following format generation. Requires the key."""

	# --- construction ----------------------------------------------------------

	@classmethod
	def from_plaintext(cls, password: str, content: PlaintextContent) -> 'Keyed':
		"""Encrypt ``content`` under ``password`` with a fresh IV and KDF salt."""
		salt = cls.new_salt()
		iv = crypto.generate_iv()
		key = cls.hash_key(salt, password)
		store = cls(Content(
			version=cls.VERSION,
			token=cls.encrypt(settings.ENCRYPT_TOKEN, iv, key),
			iv=iv,
			salt=salt,
			last_update=content.last_update,
		))
		store.key = key
		store.content.inner = [Entry(
			name=e.name,
			tags=list(e.tags),
			fields=[Field(f.name, store._seal(f.value)) for f in e.fields],
			first_added=e.first_added,
			last_update=e.last_update,
		) for e in content.entries]
		return store

	@classmethod
	def make_new(cls, password: str) -> 'Keyed':
		return cls.from_plaintext(password, PlaintextContent.init())

	@classmethod
	def from_dict(cls, raw: Any) -> 'Keyed':
		what = f'{cls.VERSION} file'
		if not isinstance(raw, dict): raise ParseError(f'{what}: expected a mapping')
		version = require(raw, 'version', str, what)
		if version != cls.VERSION: raise ParseError(f'{what}: unexpected version {version!r}')
		iv = b64decode(raw.get('iv'), 'iv')
		if len(iv) != settings.IV_LENGTH: raise ParseError(f'{what}: iv must be {settings.IV_LENGTH} bytes')
		salt = require(raw, 'salt', str, what) if cls.HAS_SALT else None
		if salt is not None and len(b64decode(salt + '=' * (-len(salt) % 4), 'salt')) < 8:
			raise ParseError(f'{what}: salt is too short')
		return cls(Content(
			version=version,
			token=b64decode(raw.get('token'), 'token'),
			iv=iv,
			salt=salt,
			last_update=load_time(raw.get('last_update'), what),
			inner=[cls._load_entry(e, f'entry {i}') for i, e in enumerate(require(raw, 'inner', list, what))],
		))

	@classmethod
	def _load_entry(cls, raw: Any, what: str) -> Entry:
		if not isinstance(raw, dict): raise ParseError(f'{what}: expected a mapping')
		fields = []
		for j, f in enumerate(require(raw, 'fields', list, what)):
			if not isinstance(f, dict): raise ParseError(f'{what} field {j}: expected a mapping')
			fields.append(Field(require(f, 'name', str, what), cls._load_value(f.get('value'), f'{what} field {j}')))
		return Entry(
			name=require(raw, 'name', str, what),
			tags=string_list(raw.get('tags', []), what),
			fields=fields,
			first_added=load_time(raw.get('first_added'), what),
			last_update=load_time(raw.get('last_update'), what),
		)

	@classmethod
	def _load_value(cls, raw: Any, what: str) -> Value:
		if not isinstance(raw, dict) or len(raw) != 1: raise ParseError(f'{what}: malformed value')
		(tag, body), = raw.items()
		kinds = {t: k for k, t in cls.VALUE_TAGS.items()}
		kind = kinds.get(tag)
		if kind is ValueKind.BASIC and isinstance(body, str):
			return Basic(body)
		if kind is ValueKind.PROTECTED:
			return Protected(b64decode(body, what))
		if kind is ValueKind.TOTP and isinstance(body, dict):
			return Totp(require(body, 'issuer', str, what), b64decode(body.get('secret'), what))
		raise ParseError(f'{what}: unknown value {tag!r} for {cls.VERSION}')

	# --- serialization ---------------------------------------------------------

	def to_dict(self) -> Dict[str, Any]:
		c = self.content
		out: Dict[str, Any] = {'version': c.version, 'token': b64encode(c.token), 'iv': b64encode(c.iv)}
		if self.HAS_SALT: out['salt'] = c.salt
		out['last_update'] = dump_time(c.last_update)
		out['inner'] = [{
			'name': e.name,
			'tags': list(e.tags),
			'fields': [{'name': f.name, 'value': self._dump_value(f.value)} for f in e.fields],
			'first_added': dump_time(e.first_added),
			'last_update': dump_time(e.last_update),
		} for e in c.inner]
		return out

	def _dump_value(self, value: Value) -> Dict[str, Any]:
		tag = self.VALUE_TAGS[kind_of(value)]
		if isinstance(value, Basic): return {tag: value.value}
		if isinstance(value, Protected): return {tag: b64encode(value.ciphertext)}
		return {tag: {'issuer': value.issuer, 'secret': b64encode(value.secret)}}

	def write(self) -> str:
		return yaml.safe_dump(self.to_dict(), sort_keys=False, allow_unicode=True)

	# --- key handling ----------------------------------------------------------

	def set_key(self, password: str) -> None:
		key = self.hash_key(self.content.salt, password)
		token = self.decrypt(self.content.token, self.content.iv, key)
		if token != settings.ENCRYPT_TOKEN:
			log.info('Token check failed for %s store; key left unchanged', self.VERSION)
			raise BadCrypt()
		self.key = key
		log.info('Key set for %s store', self.VERSION)

	def decrypted(self) -> bool:
		return self.key is not None

	def unsaved(self) -> bool:
		return self._unsaved

	def mark_saved(self) -> None:
		self._unsaved = False

	def _require_key(self, kind: Optional[ValueKind] = None) -> bytes:
		if self.key is None: raise ContentsNotUnlocked(kind)
		return self.key

	def _open(self, data: bytes) -> str:
		return crypto.to_text(self.decrypt(data, self.content.iv, self._require_key()))

	def _seal(self, value: PlaintextValue) -> Value:
		"""Turn a plaintext value into this format's stored value."""
		if isinstance(value, TotpValue):
			if not self.SUPPORTS_TOTP: raise UnsupportedFeature('totp')
			key = self._require_key(ValueKind.TOTP)
			return Totp(value.issuer, self.encrypt(value.secret.encode('utf-8'), self.content.iv, key))
		if not value.protected:
			return Basic(value.value)
		key = self._require_key(ValueKind.PROTECTED)
		return Protected(self.encrypt(value.value.encode('utf-8'), self.content.iv, key))

	def _unseal(self, value: Value) -> PlaintextValue:
		if isinstance(value, Basic): return ManualValue(value.value, False)
		if isinstance(value, Protected): return ManualValue(self._open(value.ciphertext), True)
		return TotpValue(value.issuer, self._open(value.secret))

	# --- entries ---------------------------------------------------------------

	def num_entries(self) -> int:
		return len(self.content.inner)

	def entry(self, idx: int) -> 'EntryView':
		return EntryView(self, self.content.inner[idx])

	def entry_mut(self, idx: int) -> 'EntryEditor':
		return EntryEditor(self, self.content.inner[idx])

	def add_empty_entry(self, name: str) -> int:
		t = now()
		self.content.inner.append(Entry(name, [], [], t, t))
		self._touch(t)
		return len(self.content.inner) - 1

	def remove_entry(self, idx: int) -> None:
		del self.content.inner[idx]
		self._touch(now())

	def _touch(self, t: Timestamp) -> None:
		self.content.last_update = t
		self._unsaved = True

	# --- conversion ------------------------------------------------------------

	def to_plaintext(self) -> PlaintextContent:
		self._require_key()
		return PlaintextContent(
			last_update=self.content.last_update,
			entries=[PlaintextEntry(
				name=e.name,
				tags=list(e.tags),
				fields=[PlaintextField(f.name, self._unseal(f.value)) for f in e.fields],
				first_added=e.first_added,
				last_update=e.last_update,
			) for e in self.content.inner],
		)

	def is_current(self) -> bool:
		from . import CURRENT_VERSION
		return self.VERSION == CURRENT_VERSION

	def to_current(self, password: str) -> 'Keyed':
		self.set_key(password)
		store: Keyed = self
		while not store.is_current():
			nxt = store.to_next(password)
			log.info('Migrated store %s -> %s', store.VERSION, nxt.VERSION)
			store = nxt
		return store


class FieldView(FieldRef):
	def __init__(self, store: Keyed, field: Field):
		self._store = store
		self._field = field

	@property
	def name(self) -> str:
		return self._field.name

	def value_kind(self) -> ValueKind:
		return kind_of(self._field.value)

	def value(self, now: Optional[float] = None) -> str:
		v = self._field.value
		if isinstance(v, Basic): return v.value
		if isinstance(v, Protected): return self._store._open(v.ciphertext)
		return str(totp.current_code(self._store._open(v.secret), now))

	def plaintext_value(self) -> PlaintextValue:
		return self._store._unseal(self._field.value)

	def refresh_after(self, now: Optional[float] = None) -> Optional[int]:
		if not isinstance(self._field.value, Totp): return None
		return totp.seconds_remaining(now)


class FieldEditor(FieldView, FieldMut):
	def __init__(self, store: Keyed, entry: Entry, field: Field):
		super().__init__(store, field)
		self._entry = entry

	def swap_encryption(self) -> None:
		self._store._require_key()
		v = self._field.value
		if isinstance(v, Totp): raise IsTotp()
		if isinstance(v, Basic):
			self._field.value = self._store._seal(ManualValue(v.value, True))
		else:
			self._field.value = Basic(self._store._open(v.ciphertext))
		t = now()
		self._entry.last_update = t
		self._store._touch(t)


class Builder(FieldBuilder):
	def __init__(self, supports_totp: bool):
		self._supports_totp = supports_totp
		self.name: Optional[str] = None
		self.value: Optional[PlaintextValue] = None

	def make_manual(self) -> None:
		pass

	def make_totp(self) -> None:
		if not self._supports_totp: raise UnsupportedFeature('totp')

	def set_name(self, name: str) -> None:
		self.name = name

	def set_value(self, value: PlaintextValue) -> None:
		if isinstance(value, TotpValue): self.make_totp()
		self.value = value


class EntryView(EntryRef):
	def __init__(self, store: Keyed, entry: Entry):
		self._store = store
		self._entry = entry

	@property
	def name(self) -> str:
		return self._entry.name

	@property
	def tags(self) -> List[str]:
		return list(self._entry.tags)

	@property
	def first_added(self) -> Timestamp:
		return self._entry.first_added

	@property
	def last_update(self) -> Timestamp:
		return self._entry.last_update

	@property
	def num_fields(self) -> int:
		return len(self._entry.fields)

	def field(self, idx: int) -> FieldView:
		return FieldView(self._store, self._entry.fields[idx])


class EntryEditor(EntryView, EntryMut):
	def _updated(self) -> None:
		t = now()
		self._entry.last_update = t
		self._store._touch(t)

	def set_name(self, name: str) -> None:
		self._entry.name = name
		self._updated()

	def set_tags(self, tags: List[str]) -> None:
		self._entry.tags = list(tags)
		self._updated()

	def field_mut(self, idx: int) -> FieldEditor:
		return FieldEditor(self._store, self._entry, self._entry.fields[idx])

	def field_builder(self) -> Builder:
		return Builder(self._store.SUPPORTS_TOTP)

	def set_field(self, idx: int, builder: Builder) -> None:
		if builder.name is None: raise ValueError('no name set in builder')
		if builder.value is None: raise ValueError('no value set in builder')
		fields = self._entry.fields
		if not 0 <= idx <= len(fields): raise IndexError(f'field index {idx} out of range')
		field = Field(builder.name, self._store._seal(builder.value))
		if idx == len(fields):
			fields.append(field)
		else:
			fields[idx] = field
		self._updated()

	def remove_field(self, idx: int) -> None:
		del self._entry.fields[idx]
		self._updated()
