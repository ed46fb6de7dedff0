"""Whole-store conversions behind the command line: text in, text out."""
from __future__ import annotations
import logging
from . import plaintext
from .version import CurrentStore, parse

log = logging.getLogger(__name__)

def new_store(password: str) -> str:
	"""Serialized empty store in the current format."""
	return CurrentStore.make_new(password).write()

def export_plaintext(text: str, password: str) -> str:
	"""Decrypt a store of any version into the plaintext interchange format."""
	store, _warning = parse(text)
	store.set_key(password)
	return plaintext.dumps(store.to_plaintext())

def import_plaintext(text: str, password: str) -> str:
	"""Encrypt a plaintext document under ``password`` as a current-format store."""
	store = CurrentStore.from_plaintext(password, plaintext.loads(text))
	log.info('Imported %d entries', store.num_entries())
	return store.write()

def upgrade(text: str, password: str) -> str:
	store, _warning = parse(text)
	return store.to_current(password).write()
