"""Program entry point (CLI dispatcher)."""
from __future__ import annotations
import logging, os
from passfile.cli.commands import cli
from passfile.config import settings

def main():  # pragma: no cover - thin wrapper
	logging.basicConfig(
		level=os.environ.get('PASSFILE_LOG_LEVEL', settings.LOG_LEVEL).upper(),
		format='%(levelname)s %(name)s: %(message)s',
	)
	cli()

if __name__ == '__main__':  # pragma: no cover
	main()
