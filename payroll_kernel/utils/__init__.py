"""Utility functions for the payroll kernel."""
