# apps/core/__init__.py

"""
Core - main application of the dashboard

Contains:
- User and Project models
- Token authentication service and permission decorators
- JSON API views for auth, projects, users and health
- Demo data seed command
"""
