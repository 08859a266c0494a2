"""
Shared helpers.
"""
