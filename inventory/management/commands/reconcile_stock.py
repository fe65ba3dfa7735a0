"""
Compare each product's stock_qty with the sum of its stock entries.

Usage:
python manage.py reconcile_stock
python manage.py reconcile_stock --product PRODUCT2601
python manage.py reconcile_stock --include-inactive
"""

from django.core.management.base import BaseCommand, CommandError
from django.db.models import Sum
from django.db.models.functions import Coalesce

from inventory.models import Product


class Command(BaseCommand):
    help = 'Report products whose stock quantity does not match their stock entry history'

    def add_arguments(self, parser):
        parser.add_argument('--product', help='Only check this product_id')
        parser.add_argument(
            '--include-inactive',
            action='store_true',
            help='Also check soft-deleted products',
        )

    def handle(self, *args, **options):
        products = Product.objects.all()
        if not options['include_inactive']:
            products = products.filter(is_active=True)
        if options['product']:
            products = products.filter(product_id=options['product'])
            if not products.exists():
                raise CommandError(f"Product {options['product']} not found")

        products = products.annotate(ledger=Coalesce(Sum('stock_entries__quantity'), 0)).order_by('product_id')

        checked = 0
        drifted = 0
        for product in products:
            checked += 1
            if product.ledger == product.stock_qty:
                continue
            drifted += 1
            self.stdout.write(self.style.WARNING(
                f"{product.product_id} ({product.name}): "
                f"stock_qty={product.stock_qty} entries={product.ledger} "
                f"drift={product.stock_qty - product.ledger:+d}"
            ))

        if drifted:
            self.stdout.write(self.style.ERROR(f"{drifted} of {checked} products out of balance"))
        else:
            self.stdout.write(self.style.SUCCESS(f"All {checked} products balanced"))
