"""
# Services Package

- **`membership_editor`**: pure add/remove edits of a fetched configuration.
- **`initialization_controller`**: bootstrap of a new single-member set.
- **`membership_reconciler`**: one fetch/edit/submit reconciliation cycle.
- **`membership_probe`**: bootstrap-vs-join membership check.
"""
