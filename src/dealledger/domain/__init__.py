"""Domain layer: fact ledger, reconciliation and alert resolution."""
