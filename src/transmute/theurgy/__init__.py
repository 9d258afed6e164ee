"""
Theurgy - Command implementations for Transmute.

Each module corresponds to a top-level CLI command:
- balance: Show native and ERC-20 balances
- quote:   Router quote plus slippage-adjusted minimum output
- wrap:    Wrap native currency
- approve: Approve an ERC-20 spender
- swap:    Swap exact input tokens
- run:     The whole quote -> wrap -> approve -> swap sequence
"""
