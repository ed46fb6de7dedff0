"""Format generations and version dispatch for stored files."""
from __future__ import annotations
import logging
from typing import Optional, Tuple, Type
import yaml
from ..errors import ParseError
from ..model import FormatWarning
from . import v0_2, v0_3, v0_4
from .common import Keyed

log = logging.getLogger(__name__)

VERSIONS = {
	v0_2.VERSION_STR: v0_2.Store,
	v0_3.VERSION_STR: v0_3.Store,
	v0_4.VERSION_STR: v0_4.Store,
}
CURRENT_VERSION = v0_4.VERSION_STR
CurrentStore: Type[Keyed] = v0_4.Store

def parse(text: str) -> Tuple[Keyed, Optional[FormatWarning]]:
	"""Load a stored file of any known version. The result is still locked (no key set)."""
	try:
		raw = yaml.safe_load(text)
	except yaml.YAMLError as e:
		raise ParseError(f'invalid YAML: {e}') from None
	if not isinstance(raw, dict): raise ParseError('expected a mapping at the top level')
	version = raw.get('version')
	if not isinstance(version, str): raise ParseError('missing "version"')
	cls = VERSIONS.get(version)
	if cls is None: raise ParseError(f'unknown version {version!r}')
	log.debug('Parsing %s store', version)
	store = cls.from_dict(raw)
	if cls.WARNING is not None:
		log.warning('%s', cls.WARNING.reason)
	return store, cls.WARNING

__all__ = ['VERSIONS', 'CURRENT_VERSION', 'CurrentStore', 'Keyed', 'parse']
