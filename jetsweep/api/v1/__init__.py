"""
API v1 - leave-by planner endpoints
"""
