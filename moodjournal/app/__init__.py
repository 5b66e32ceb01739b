"""Mood journal web application."""
