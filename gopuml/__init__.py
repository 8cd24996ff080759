"""Go source tree to PlantUML class diagram generator."""

__version__ = "0.1.0"
