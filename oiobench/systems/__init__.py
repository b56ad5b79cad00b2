"""
Object storage systems the benchmark can drive.
"""

from .base import ObjectStorageSystem
from .fs import FsSystem

__all__ = ['ObjectStorageSystem', 'FsSystem']
