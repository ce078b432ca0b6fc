"""
Command Line Interface for the HTML to Markdown crawler

This package provides command line argument parsing and validation
for the crawler. It handles URL source selection, output layout
options and configuration overrides.

Classes:
    CLIManager: Command line interface manager for the crawler
"""

from site2md.cli.arguments import CLIManager

__all__ = ['CLIManager']
