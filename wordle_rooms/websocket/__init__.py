"""
WebSocket Package

Socket.IO event handlers.
"""
