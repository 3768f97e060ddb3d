"""Faculty System package.

This package is organized by feature modules (users, courses, attendance,
grades, notifications) with a thin Flask controller layer over service and
repository layers.
"""
