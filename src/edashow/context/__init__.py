"""Persona and knowledge resolution for system prompts."""
