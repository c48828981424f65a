"""Batch-job endpoints and their job wiring."""
