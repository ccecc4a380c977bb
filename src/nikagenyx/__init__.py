"""Nikagenyx Books package.

Organized by feature modules (accounts, journal, ledger, employees, ...)
with a thin Flask controller layer over service/repository layers.
"""

__version__ = "0.1.0"
