"""Mock server module.

This module provides a Flask mock of the transfer endpoint for local testing.
"""
