"""
Client-side view state.
"""

from .settings import DEFAULT, UserSettings, decode, encode, load, merge, save

__all__ = ['DEFAULT', 'UserSettings', 'decode', 'encode', 'load', 'merge', 'save']
