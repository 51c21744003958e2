"""
Theurgy - Command implementations for Angelos.

Each module corresponds to a top-level CLI command:
- read: Resolve a contract's message and type it out
"""
