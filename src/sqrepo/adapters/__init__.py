"""Adapters – concrete store models."""
