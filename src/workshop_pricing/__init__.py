"""
Workshop Pricing Package

Prices workshop registrations for members: membership tier discount,
promotional discount and Canadian sales tax, all in integer cents.
"""

__version__ = "1.0.0"
