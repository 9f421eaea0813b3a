"""
Operator Scripts
"""
