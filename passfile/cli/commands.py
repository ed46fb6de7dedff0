"""CLI commands implemented with click.

Every command reads and writes whole files; nothing is edited in place.
"""
from __future__ import annotations
import click
from pathlib import Path
from passfile.lib import operations
from passfile.lib.errors import PassfileError
from passfile.lib.storage import StoreFile

def _fail(e: Exception):
	click.echo(f'Error: {e}', err=True)
	raise SystemExit(1)

@click.group()
def cli():
	"""passfile: encrypted, versioned secret store"""

@cli.command()
@click.argument('file', type=click.Path(path_type=Path))
@click.option('--password', prompt=True, hide_input=True, confirmation_prompt=True)
@click.option('--force', is_flag=True, help='Overwrite FILE if it already exists.')
def new(file, password, force):
	"""Create a new empty store at FILE."""
	try:
		StoreFile(file).create(password, force=force)
		click.echo(f'Created {file}.')
	except PassfileError as e:
		_fail(e)

@cli.command('emit-plaintext')
@click.argument('input', type=click.Path(path_type=Path))
@click.argument('output', type=click.Path(path_type=Path))
@click.option('--password', prompt=True, hide_input=True)
def emit_plaintext(input, output, password):
	"""Decrypt INPUT and write its contents unencrypted to OUTPUT."""
	try:
		text = operations.export_plaintext(StoreFile(input).read(), password)
		StoreFile(output).write(text)
		click.echo(f'Wrote plaintext to {output}. It is NOT encrypted.')
	except PassfileError as e:
		_fail(e)

@cli.command('from-plaintext')
@click.argument('input', type=click.Path(path_type=Path))
@click.argument('output', type=click.Path(path_type=Path))
@click.option('--password', prompt=True, hide_input=True, confirmation_prompt=True)
def from_plaintext(input, output, password):
	"""Encrypt the plaintext document INPUT into a new store at OUTPUT."""
	try:
		text = operations.import_plaintext(StoreFile(input).read(), password)
		StoreFile(output).write(text)
		click.echo(f'Created {output}.')
	except PassfileError as e:
		_fail(e)

@cli.command()
@click.argument('input', type=click.Path(path_type=Path))
@click.argument('output', type=click.Path(path_type=Path))
@click.option('--password', prompt=True, hide_input=True)
def update(input, output, password):
	"""Upgrade INPUT to the current file format, writing the result to OUTPUT."""
	try:
		text = operations.upgrade(StoreFile(input).read(), password)
		StoreFile(output).write(text)
		click.echo(f'Upgraded {input} -> {output}.')
	except PassfileError as e:
		_fail(e)

@cli.command('list')
@click.argument('file', type=click.Path(path_type=Path))
def list_entries(file):
	"""List entry names and tags (no password needed)."""
	try:
		store, warning = StoreFile(file).load()
		if warning is not None: click.echo(str(warning), err=True)
		for i in range(store.num_entries()):
			e = store.entry(i)
			tags = ', '.join(e.tags) or '-'
			click.echo(f'{i}: {e.name} [{tags}]')
	except PassfileError as e:
		_fail(e)

@cli.command('show')
@click.argument('file', type=click.Path(path_type=Path))
@click.argument('index', type=int)
@click.option('--password', prompt=True, hide_input=True)
def show_entry(file, index, password):
	"""Show every field of entry INDEX, decrypted."""
	try:
		store, warning = StoreFile(file).load()
		if warning is not None: click.echo(str(warning), err=True)
		if not 0 <= index < store.num_entries():
			_fail(IndexError(f'no entry {index}'))
		store.set_key(password)
		e = store.entry(index)
		click.echo(f"Name: {e.name}\nTags: {', '.join(e.tags) or '-'}\nAdded: {e.first_added.to_datetime().isoformat()}\nUpdated: {e.last_update.to_datetime().isoformat()}\n---")
		for j in range(e.num_fields):
			f = e.field(j)
			click.echo(f'{f.name} ({f.value_kind()}): {f.value()}')
	except PassfileError as e:
		_fail(e)
