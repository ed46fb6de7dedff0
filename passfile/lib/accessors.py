"""Format-agnostic views over a loaded store.

Callers (CLI, UI) only ever talk to these interfaces; which file format
generation sits behind them, and how its values are encrypted, stays hidden.
Views are short-lived: take one, use it, drop it. Indices are preconditions,
so validate them against ``num_entries()`` / ``num_fields`` first.
"""
from __future__ import annotations
from abc import ABC, abstractmethod
from typing import List, Optional
from .model import FormatWarning, Timestamp, ValueKind
from .plaintext import PlaintextContent, PlaintextValue


class FieldRef(ABC):
	@property
	@abstractmethod
	def name(self) -> str: ...

	@abstractmethod
	def value_kind(self) -> ValueKind: ...

	@abstractmethod
	def value(self, now: Optional[float] = None) -> str:
		"""Displayable value; for TOTP fields, the live code and the time left on it.

		Raises ContentsNotUnlocked, DecryptError or BadTotpSecret.
		"""

	@abstractmethod
	def plaintext_value(self) -> PlaintextValue:
		"""Canonical stored form, suitable for feeding back into a FieldBuilder."""

	@abstractmethod
	def refresh_after(self, now: Optional[float] = None) -> Optional[int]:
		"""Seconds until ``value()`` changes, or None if it never does."""


class FieldMut(FieldRef):
	@abstractmethod
	def swap_encryption(self) -> None:
		"""Toggle Basic <-> Protected in place. Raises ContentsNotUnlocked or IsTotp."""


class FieldBuilder(ABC):
	"""Staged constructor for a field, consumed by ``EntryMut.set_field``."""

	@abstractmethod
	def make_manual(self) -> None: ...

	@abstractmethod
	def make_totp(self) -> None:
		"""Raises UnsupportedFeature on formats without TOTP values."""

	@abstractmethod
	def set_name(self, name: str) -> None: ...

	@abstractmethod
	def set_value(self, value: PlaintextValue) -> None: ...


class EntryRef(ABC):
	@property
	@abstractmethod
	def name(self) -> str: ...

	@property
	@abstractmethod
	def tags(self) -> List[str]: ...

	@property
	@abstractmethod
	def first_added(self) -> Timestamp: ...

	@property
	@abstractmethod
	def last_update(self) -> Timestamp: ...

	@property
	@abstractmethod
	def num_fields(self) -> int: ...

	@abstractmethod
	def field(self, idx: int) -> FieldRef: ...


class EntryMut(EntryRef):
	"""Every mutation bumps the entry's and the store's ``last_update`` and marks the store unsaved."""

	@abstractmethod
	def set_name(self, name: str) -> None: ...

	@abstractmethod
	def set_tags(self, tags: List[str]) -> None: ...

	@abstractmethod
	def field_mut(self, idx: int) -> FieldMut: ...

	@abstractmethod
	def field_builder(self) -> FieldBuilder: ...

	@abstractmethod
	def set_field(self, idx: int, builder: FieldBuilder) -> None:
		"""Replace field ``idx``, or append when ``idx == num_fields``.

		Raises ContentsNotUnlocked when the new value needs encrypting and no key is set.
		"""

	@abstractmethod
	def remove_field(self, idx: int) -> None: ...


class FileContent(ABC):
	"""A loaded store of any format generation, plus its key and unsaved flag."""

	VERSION: str
	WARNING: Optional[FormatWarning] = None

	@abstractmethod
	def num_entries(self) -> int: ...

	@abstractmethod
	def entry(self, idx: int) -> EntryRef: ...

	@abstractmethod
	def entry_mut(self, idx: int) -> EntryMut: ...

	@abstractmethod
	def add_empty_entry(self, name: str) -> int: ...

	@abstractmethod
	def remove_entry(self, idx: int) -> None: ...

	@abstractmethod
	def set_key(self, password: str) -> None:
		"""Derive the key and check it against the stored token. Raises BadCrypt on a wrong password."""

	@abstractmethod
	def decrypted(self) -> bool: ...

	@abstractmethod
	def unsaved(self) -> bool: ...

	@abstractmethod
	def mark_saved(self) -> None: ...

	@abstractmethod
	def write(self) -> str: ...

	@abstractmethod
	def to_plaintext(self) -> PlaintextContent: ...

	@abstractmethod
	def to_current(self, password: str) -> 'FileContent':
		"""Convert to the newest format generation (identity if already current)."""
