from django.apps import AppConfig


class InventoryConfig(AppConfig):
    """
    Configuration for the Inventory application.

    This app manages:
    - Categories (soft-deleted, auto-generated CAT-NNNN codes)
    - Products (auto-generated PRODUCT<yy><NN> ids, on-hand stock)
    - Stock Entries (opening, purchase, sale, return, adjustment)

    Stock changes caused by orders go through inventory.services.ledger.
    """

    default_auto_field = 'django.db.models.BigAutoField'
    name = 'inventory'
    verbose_name = 'Inventory Management'

    def ready(self):
        """
        Import signal handlers when the app is ready.

        Signals handle:
        - Product creation / update logging and low stock alerts
        - Stock movement audit logging
        """
        import inventory.signals  # noqa: F401
