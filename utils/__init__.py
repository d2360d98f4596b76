"""Bookshelf - terminal output helpers."""
