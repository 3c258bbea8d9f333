"""
GUI Components - Reusable UI components
"""
from .helpers import AlertClearHelper

__all__ = ['AlertClearHelper']
