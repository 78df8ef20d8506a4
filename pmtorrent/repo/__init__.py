"""
File repository.

The catalog an outer transport layer calls: list the stored files and
fetch individual pieces with their proofs.
"""
from .repository import Repository

__all__ = ["Repository"]
