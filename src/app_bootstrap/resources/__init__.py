"""Bundled resources: application.properties and schema.sql."""
