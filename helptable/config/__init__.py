"""
Configuration loading for helptable.
"""
