"""Core domain: models, environment snapshot, encoder and builder."""
