"""
Core domain models, mathematical primitives, and settings.

This module contains the building blocks of the expression engine that are
independent of any input surface (keypad, display, etc.).
"""
