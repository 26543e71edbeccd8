"""Domain layer for farepay.

Services live in their own modules (``farepay.domain.fare``,
``farepay.domain.ledger`` ...) and are imported from there; this package
stays import-free so the database layer can depend on the entities.
"""
