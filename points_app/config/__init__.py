"""
Configuration module.

Network, contract and confirmation settings with layered overrides.
"""
