"""Exports & reporting: CSV writers and Markdown reports.

- writers.py: CSV emitters for the enterprise view and the directory
- reports.py: coverage report generator
"""
