"""Host resource and HTTP endpoint health probe"""

__version__ = "1.0.0"
