"""
Authentication app: the email-identified account model.

Accounts are the buyers, vendors and platform administrators the refund
engine reasons about. Platform administrators are accounts holding the
``commerce.administer_refunds`` permission (superusers hold it implicitly).
"""
