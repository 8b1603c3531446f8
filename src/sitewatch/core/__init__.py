"""Monitoring engine: probing, shared state, persistence and scheduling."""
