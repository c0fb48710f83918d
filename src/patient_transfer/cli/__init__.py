"""CLI module.

This module provides the command-line interface for Patient Transfer.
"""
