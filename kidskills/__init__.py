"""
KidSkills adaptive question engine.
"""

__version__ = "1.0.0"
