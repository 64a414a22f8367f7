"""
Command-line front-end for helptable.
"""
