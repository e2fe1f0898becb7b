"""
Commerce app: the catalog and order records the refund engine reads.

Stores and events belong to vendors; orders and their line items belong
to buyers. Refunds never mutate anything in here.
"""
