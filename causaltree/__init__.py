"""Causal tree pieces: an effect-based split rule, tree bookkeeping, surrogates and honest estimation."""

__version__ = "0.1.0"