"""Bundled resource (classpath) adapter."""
