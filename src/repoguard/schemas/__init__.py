"""Precomputed JSON schemas of the shared configuration domains."""
