"""
API package - versioned HTTP routers
"""
