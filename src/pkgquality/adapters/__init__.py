"""Package registry adapters."""

from pkgquality.adapters.base import BaseAdapter, locate_repo
from pkgquality.adapters.npm import NpmAdapter

__all__ = ["BaseAdapter", "NpmAdapter", "locate_repo"]
