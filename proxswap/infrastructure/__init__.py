"""
Infrastructure layer: filesystem and external processes
"""
