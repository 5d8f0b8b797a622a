# sales/apps.py

"""
SALES APP CONFIG

Customer sales (business events) with best-effort posting of revenue
and cost-of-goods-sold entries to the ledger.
"""

from django.apps import AppConfig


class SalesConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "sales"
    verbose_name = "Sales"
