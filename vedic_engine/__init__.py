"""
Vedic astrology calculation engine.

Pure functions and small calculator classes that turn planetary longitudes
and nakshatra names into signs, houses, compatibility scores, dasha
timelines, transit approximations and Sade Sati windows.
"""

__version__ = "0.1.0"
