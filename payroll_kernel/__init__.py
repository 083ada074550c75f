"""
Payroll Kernel

An in-process payroll register with:
- Owner-administered employee roster
- Sequential, never-reused employee ids
- Period-gated self-service pay claims
- A fixed token pool that claims can never overdraw
- Hash-chained event journal
"""

__version__ = "0.1.0"
