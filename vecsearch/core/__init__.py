"""Core domain, ports and services for vecsearch."""
