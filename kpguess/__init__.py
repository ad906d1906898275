# kpguess/__init__.py
"""
Kinopoisk Guess Game Bot

Plays the Kinopoisk guess game through its HTTP API and keeps a per-episode
file of confirmed answers so later sessions stop guessing.
"""

__version__ = "1.0.0"
