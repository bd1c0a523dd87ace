"""Payroll ledger for hourly and piece-rate work."""

__version__ = "0.1.0"
