"""
FastAPI routers for the event trip planner
"""
