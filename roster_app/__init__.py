"""
Roster Cost App - staff rosters and labor cost allocation across projects.
"""
