"""Choir Console package.

This package is organized by feature modules (sites, members, events,
attendance, users, ...) with a thin Flask controller layer over pure
service functions and a key/value persistence layer.
"""
