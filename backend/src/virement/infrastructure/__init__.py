"""
Infrastructure package - collaborators the order workflow depends on.
"""
