# apps/__init__.py

"""
Mini SaaS Dashboard - Django applications

- core: models, authentication and the project API
- board: kanban data and live project updates over WebSocket
- reports: dashboard summary and CSV/Excel exports
"""

__version__ = '0.1.0'
