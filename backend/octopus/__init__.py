"""Octopus - TruStory backend-for-frontend (truapi, pushd, spotlight, batch actions).

Invariants:
    - Package root contains no executable code (import side-effects prohibited)
"""
