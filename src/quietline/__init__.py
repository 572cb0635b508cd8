"""Quietline: relationship state machine and ephemeral ciphertext relay."""

__version__ = "0.1.0"
