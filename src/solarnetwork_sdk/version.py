"""Version information for the SolarNetwork Python SDK"""

__version__ = "0.1.0"
