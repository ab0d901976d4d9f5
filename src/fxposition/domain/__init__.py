"""Domain layer for fxposition application.

Services are imported from their modules (e.g. ``fxposition.domain.balance``)
so that the database layer can import ``fxposition.domain.entities`` without
pulling every service in.
"""
