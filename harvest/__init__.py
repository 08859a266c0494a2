"""
Harvest: task tracking core for the farm game.
"""
