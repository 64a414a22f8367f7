"""
helptable: turn a command's --help output into a markdown table.
"""

__version__ = "0.1.0"
