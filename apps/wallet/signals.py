"""
Domain events raised by the wallet app.

Sent only after the surrounding transaction commits, so receivers never
observe a repayment that was rolled back.
"""

from django.dispatch import Signal

# kwargs: payer, creditor, amount, splits_updated
debt_repaid = Signal()
