"""
The CONTROLLER layer turns commands and pointer events into new snapshots.
"""
