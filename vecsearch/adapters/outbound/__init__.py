"""Outbound adapters: embedding providers, vector stores, document sources."""
