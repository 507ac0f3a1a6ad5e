# apps/reports/__init__.py

"""
Reports - dashboard metrics and exports

- Summary counters for the dashboard header
- CSV and Excel export of the project table
"""
