from sqlbind.adapters import sqlite

__all__ = ("sqlite",)
