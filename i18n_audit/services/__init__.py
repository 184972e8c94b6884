"""Pipeline services: scanning, diffing, reporting."""
