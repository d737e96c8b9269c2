"""
Domain package - Core business logic with no external dependencies.

This package contains pure Python domain models, the French amount
speller, the greedy text wrapper and the order assembly rules.
"""
