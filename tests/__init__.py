"""
Test suite for the keypad expression engine

Contains:
- tests/unit/          : Unit tests for individual modules and the pipeline
"""
