"""
Donations module: blood, donor, health entity, request and blood bag models
plus the read-only repository the reports are generated from.
"""
