"""Whole-file persistence of a store on disk."""
from __future__ import annotations
import os, logging
from pathlib import Path
from typing import Optional, Tuple
from passfile.config import settings
from .errors import StorageError
from .model import FormatWarning
from .version import CurrentStore, Keyed, parse

log = logging.getLogger(__name__)

class StoreFile:
	def __init__(self, path: Path | str | None = None):
		# Resolved per instance so PASSFILE_PATH set after import still applies
		if path is not None:
			self.path = Path(path)
		else:
			env_path = os.environ.get('PASSFILE_PATH')
			self.path = Path(env_path) if env_path else settings.DEFAULT_STORE_PATH

	def exists(self) -> bool:
		return self.path.exists() and self.path.stat().st_size > 0

	def read(self) -> str:
		try:
			return self.path.read_text(encoding='utf-8')
		except FileNotFoundError:
			raise StorageError(f'No such file: {self.path}') from None
		except (OSError, UnicodeDecodeError) as e:
			raise StorageError(f'Failed to read {self.path}: {e}') from None

	def load(self) -> Tuple[Keyed, Optional[FormatWarning]]:
		"""Parse the file; the returned store is still locked."""
		return parse(self.read())

	def write(self, text: str) -> None:
		tmp = self.path.with_name(self.path.name + settings.TMP_SUFFIX)
		try:
			with open(tmp, 'w', encoding='utf-8') as f:
				f.write(text)
				f.flush()
				os.fsync(f.fileno())
			os.replace(tmp, self.path)
		except OSError as e:
			tmp.unlink(missing_ok=True)
			raise StorageError(f'Failed to write {self.path}: {e}') from None

	def save(self, store: Keyed) -> None:
		self.write(store.write())
		store.mark_saved()
		log.info('Store saved -> %s', self.path)

	def create(self, password: str, force: bool = False) -> Keyed:
		if self.exists() and not force: raise StorageError(f'{self.path} already exists')
		store = CurrentStore.make_new(password)
		self.save(store)
		return store
