"""
Campus Match - application shell.

Settings, Supabase access, image hosting and the web/CLI entry points
around the onboarding wizard in the sibling `onboarding` package.
"""

__version__ = "1.0.0"
