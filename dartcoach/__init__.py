"""
Darts scorekeeping engine: X01 and Round the Clock matches, checkout
advice, a simulated dartbot and saved player profiles.
"""
__version__ = "0.1.0"
