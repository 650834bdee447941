"""Business services for SmileHub: tenant and patient stores, ledger."""
