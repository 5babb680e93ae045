"""Founder discovery API."""
