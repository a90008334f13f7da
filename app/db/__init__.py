"""Ledger store package for all mutable state boundaries."""

from .health import InMemoryLedgerStoreHealthService
from .interfaces import LedgerStoreHealthPort, LedgerStorePort
from .ledger_store import InMemoryLedgerStore

__all__ = [
	"InMemoryLedgerStore",
	"InMemoryLedgerStoreHealthService",
	"LedgerStoreHealthPort",
	"LedgerStorePort",
]
