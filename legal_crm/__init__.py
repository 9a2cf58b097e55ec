"""Notification backend for the legal office CRM.

The sub-packages follow a layered layout: ``domain`` holds plain entities,
``infrastructure`` the database, transports and channel senders,
``application`` the use cases and ``interfaces`` the HTTP/websocket surface.
"""
