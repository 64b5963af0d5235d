"""
C-Store Prefill Engine - Property data reconciliation for convenience-store insurance intake.

This package fuses parcel records, places data and business registry matches for a single
business address into one insurance-form payload, with a property validity verdict and an
owner/tenant determination.
"""
