"""
Business services for the employee service.
"""
