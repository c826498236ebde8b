"""
Command-line interface for EWP CLI.
"""
