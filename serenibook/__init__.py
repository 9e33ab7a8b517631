"""SereniBook API - booking platform for wellness professionals and their clients"""

__version__ = "1.0.0"
