"""Utility functions and classes for sqlbind."""

from sqlbind.utils import logging, text, type_guards

__all__ = ("logging", "text", "type_guards")
