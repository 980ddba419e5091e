"""Pure domain logic: order snapshots, risk and stock classification."""
