"""Maintenance scripts: database provisioning, migrations and seed data."""
