"""
Tak - Rules engine for the abstract board game Tak

A deterministic engine that owns the authoritative board and provides:
- Board state with stacks and player reserves
- Move validation and application
- Road and flat win detection
- Move notation, sessions and a small REST API on top
"""

__version__ = "0.1.0"
