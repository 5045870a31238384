"""
Controller Package

HTTP blueprints.
"""
