"""Configuration, derivation and wiring shared by the whole service."""
