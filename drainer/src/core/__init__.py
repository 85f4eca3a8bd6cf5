"""
Core drainer modules: host removal, lifecycle completion and the dispatch loop
"""
