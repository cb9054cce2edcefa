"""
Core Package

Clinical decision logic, independent of the HTTP layer.
"""
