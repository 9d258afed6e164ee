"""Sigil - signing identity and key loading."""
