"""Domain layer: records, reconciliation and provisioning."""
