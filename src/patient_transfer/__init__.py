"""Patient Transfer - form-state and submission controller for patient transfers.

Lets an operator pick a candidate patient record, confirm its year of birth and
submit a transfer request to the configured endpoint.
"""

__version__ = "0.1.0"
