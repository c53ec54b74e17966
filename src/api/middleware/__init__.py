"""
API Middleware - Error handling
"""
