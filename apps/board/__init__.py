# apps/board/__init__.py

"""
Board - kanban view of the dashboard

- Projects grouped by status column
- WebSocket channel with live project events
"""
