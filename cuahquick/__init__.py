"""Cuah-Quick campus food ordering API."""
