"""
Drone Overlay Package

Projects drone video frames onto the ground footprint they were filming,
synchronized to the flight log recorded during the flight.
"""

__version__ = "0.1.0"
