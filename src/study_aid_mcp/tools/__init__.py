"""FastMCP sub-servers exposing the study service."""
