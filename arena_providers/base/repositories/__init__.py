"""
Repositories package.

Exports:
- EnvCredentialStore / StaticCredentialStore / ChainedCredentialStore: API key lookup
- KeyResolution: where a key came from
"""

from .keys import ChainedCredentialStore, EnvCredentialStore, KeyResolution, StaticCredentialStore

__all__ = [
    "EnvCredentialStore",
    "StaticCredentialStore",
    "ChainedCredentialStore",
    "KeyResolution",
]
