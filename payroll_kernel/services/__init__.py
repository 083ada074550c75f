"""
Ledger collaborators: event journal, token transfer boundary, payouts.

Import from the submodules directly.
"""
