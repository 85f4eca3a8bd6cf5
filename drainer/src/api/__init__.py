"""
Status API for the drainer
"""
