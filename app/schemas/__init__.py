# ruff: noqa: F403, F401
"""Schemas package initialization."""

from .base import *
from .client import *
from .project import *
