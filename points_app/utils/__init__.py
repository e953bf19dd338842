"""
Utility functions module.

Unit conversion between human-entered decimal strings and the integer
smallest-unit amounts contracts expect.
"""
