"""Conversation Session Service: session lifecycle and event ledger over a SQL store."""

__version__ = "0.1.0"
