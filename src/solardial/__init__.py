"""Solar Dial.

A live solar clock engine: wall-clock time, solar time and the Sun's
elevation, azimuth and ecliptic longitude for a configured location,
computed with the NOAA solar position equations.
"""

__version__ = "1.0.0"
__author__ = "Solar Dial Project"
