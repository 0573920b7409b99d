"""Hosting-container context adapter."""
