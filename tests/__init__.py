"""
SupportBot test suite.
"""
