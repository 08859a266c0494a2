"""
Core game systems: session context and task tracking.
"""
