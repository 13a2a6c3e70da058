"""Friendline social backend: friendship graph and direct-message ledger."""
