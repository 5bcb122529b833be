# Security package init
"""
LocalBiz Directory — Security Package
=======================================

    tokens.py     signed session tokens (issue / verify)
    passwords.py  password hashing
    gates.py      auth gate, role gate and the ownership check
"""
