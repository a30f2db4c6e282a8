"""Audit log service for the warehouse inventory application."""
