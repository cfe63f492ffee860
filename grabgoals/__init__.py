"""grabgoals — client core for the grab goals social goal timer."""

__version__ = "0.1.0"
