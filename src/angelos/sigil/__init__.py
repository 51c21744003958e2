"""
Sigil - Address identity checks (checksum, format, empty-code sentinel).
"""
