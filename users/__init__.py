"""
users — user directory and profile routes.
"""
