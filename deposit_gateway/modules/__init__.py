"""Domain modules (invoices, orders, withdrawals, status, chain)."""
