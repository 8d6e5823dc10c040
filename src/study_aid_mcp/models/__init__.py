"""Pydantic records returned by the study service."""
