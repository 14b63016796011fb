"""Adapters binding the ledger core to persistence and agent payloads."""
