"""
CareWatch - care-agency visit monitoring backend.

Scores carer visit observations into a green / amber / red risk level and
raises alerts for manager review.
"""
__version__ = "1.0.0"
