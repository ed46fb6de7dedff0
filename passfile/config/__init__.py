"""Configuration settings and constants for passfile.

Everything lives in :mod:`passfile.config.settings`; this package module
re-exports it so callers can write ``from passfile.config import KEY_LENGTH``.
Code that must observe patched values (tests lower the Argon2 costs) reads
them through the ``settings`` module at call time instead.
"""

from . import settings
from .settings import *  # noqa: F401,F403
from .settings import __all__ as _settings_all

__all__ = ['settings', *_settings_all]
