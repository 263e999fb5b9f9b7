"""
Application layer: marketplace services and the client-side sync layer.
"""
