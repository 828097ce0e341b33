"""
Realtime app for WebSocket communication.

Key Components:
    - broadcast.py: pushes driver go-live/offline/location changes to the live drivers group
    - consumers/: WebSocket consumers (driver, passenger)
    - notifications.py: ride lifecycle events sent to personal user groups
    - middleware.py: JWT/session authentication for WebSocket connections
"""
