"""Kuba English practice core: answer evaluation and word mastery scheduling."""
