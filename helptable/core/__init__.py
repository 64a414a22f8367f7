"""
Core modules for helptable.

This package contains the model catalog, the chat data model, command
execution, the spinner and the pipeline that ties them together.
"""
