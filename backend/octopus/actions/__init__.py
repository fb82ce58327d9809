"""Batch Actions - scheduled one-shot jobs (metrics export, snowball sweep, email campaigns).

Each module is runnable with `python -m octopus.actions.<name>` and exits non-zero on failure.
"""
