from django.apps import AppConfig


class OrdersConfig(AppConfig):
    """
    Single-product customer orders.

    Creating, updating and deleting an order moves product stock through
    inventory.services.ledger; see orders.services.lifecycle.
    """

    default_auto_field = 'django.db.models.BigAutoField'
    name = 'orders'
    verbose_name = 'Orders'
