"""
Visual collaborators of the task system (pygame).
"""
