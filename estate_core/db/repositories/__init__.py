"""
Per-domain repository modules for database access.

`estates` and `activity` also provide the SQL implementations of the store
contracts in `estate_core.db.ports`.
"""
