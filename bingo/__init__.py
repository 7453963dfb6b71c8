"""
Bingo Simulator
===============
Parses a bingo puzzle description (call sequence + square cards) and
replays the calls to find the first and last winning cards.

Architecture:
    - Card Parser: Converts a text block into a grid of cells
    - State Machine: Consumes blank-line separated chunks into a Game
    - Game: Replays calls with first-winner / last-winner policies
    - Validator: Flags structural issues (non-square cards, duplicates)
    - Engine: Loads input, runs the simulation, produces answers

Version: 1.0.0
"""

__version__ = "1.0.0"
