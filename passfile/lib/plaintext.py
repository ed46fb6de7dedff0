"""Unencrypted interchange representation used for export, import and migration.

YAML layout::

	last_update: {secs_since_epoch: ..., nanos_since_epoch: ...}
	entries:
	  - name: Bank
	    tags: [money]
	    fields:
	      - name: pin
	        value: {manual: {value: '1234', protected: true}}
	      - name: 2fa
	        value: {totp: {issuer: Bank, secret: JBSWY3DPEHPK3PXP}}
	    first_added: {...}
	    last_update: {...}

The older flat field form ``{name, value: <str>, protected: <bool>}`` is
accepted on import.
"""
from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, Dict, List, Union
import yaml
from .errors import ParseError
from .model import Timestamp
from .utils import now, dump_time, load_time, require, string_list

@dataclass
class ManualValue:
	value: str
	protected: bool

@dataclass
class TotpValue:
	issuer: str
	secret: str

PlaintextValue = Union[ManualValue, TotpValue]

@dataclass
class PlaintextField:
	name: str
	value: PlaintextValue

@dataclass
class PlaintextEntry:
	name: str
	tags: List[str]
	fields: List[PlaintextField]
	first_added: Timestamp
	last_update: Timestamp

@dataclass
class PlaintextContent:
	last_update: Timestamp
	entries: List[PlaintextEntry] = field(default_factory=list)

	@classmethod
	def init(cls) -> 'PlaintextContent':
		return cls(last_update=now())

	def to_dict(self) -> Dict[str, Any]:
		return {
			'last_update': dump_time(self.last_update),
			'entries': [{
				'name': e.name,
				'tags': list(e.tags),
				'fields': [{'name': f.name, 'value': _dump_value(f.value)} for f in e.fields],
				'first_added': dump_time(e.first_added),
				'last_update': dump_time(e.last_update),
			} for e in self.entries],
		}

	@classmethod
	def from_dict(cls, raw: Any) -> 'PlaintextContent':
		if not isinstance(raw, dict): raise ParseError('plaintext: expected a mapping')
		entries = []
		for i, e in enumerate(require(raw, 'entries', list, 'plaintext')):
			what = f'entry {i}'
			if not isinstance(e, dict): raise ParseError(f'{what}: expected a mapping')
			entries.append(PlaintextEntry(
				name=require(e, 'name', str, what),
				tags=string_list(e.get('tags', []), what),
				fields=[_load_field(f, f'{what} field {j}') for j, f in enumerate(require(e, 'fields', list, what))],
				first_added=load_time(e.get('first_added'), what),
				last_update=load_time(e.get('last_update'), what),
			))
		return cls(last_update=load_time(raw.get('last_update'), 'plaintext'), entries=entries)

def _dump_value(v: PlaintextValue) -> Dict[str, Any]:
	if isinstance(v, TotpValue):
		return {'totp': {'issuer': v.issuer, 'secret': v.secret}}
	return {'manual': {'value': v.value, 'protected': v.protected}}

def _load_field(raw: Any, what: str) -> PlaintextField:
	if not isinstance(raw, dict): raise ParseError(f'{what}: expected a mapping')
	name = require(raw, 'name', str, what)
	val = raw.get('value')
	if isinstance(val, str):
		return PlaintextField(name, ManualValue(val, require(raw, 'protected', bool, what) if 'protected' in raw else False))
	if isinstance(val, dict) and len(val) == 1:
		if isinstance(val.get('manual'), dict):
			m = val['manual']
			return PlaintextField(name, ManualValue(require(m, 'value', str, what), require(m, 'protected', bool, what)))
		if isinstance(val.get('totp'), dict):
			t = val['totp']
			return PlaintextField(name, TotpValue(require(t, 'issuer', str, what), require(t, 'secret', str, what)))
	raise ParseError(f'{what}: unrecognised value')

def dumps(content: PlaintextContent) -> str:
	return yaml.safe_dump(content.to_dict(), sort_keys=False, allow_unicode=True)

def loads(text: str) -> PlaintextContent:
	try:
		raw = yaml.safe_load(text)
	except yaml.YAMLError as e:
		raise ParseError(f'failed to parse plaintext file: {e}') from None
	return PlaintextContent.from_dict(raw)
