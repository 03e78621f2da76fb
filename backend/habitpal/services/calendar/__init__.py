"""Calendar gateways (external event store)."""
