"""
tasks — per-user task storage, filtering and routes.
"""
