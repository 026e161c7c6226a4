"""Ledger client adapters.

Imported explicitly (``from uniswappy.adapters.web3_query import
Web3UniswapQuery``) so the optional web3 dependency is only needed when used.
"""
