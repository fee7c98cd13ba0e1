"""
Adapters: settings, CLI and terminal interface
"""
