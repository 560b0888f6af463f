"""
Shared trading core: domain models and numeric helpers.

This package hosts the models exchanged between the asset registry, the
account store, the portfolio ledger, the trading engine and the risk manager.
"""
