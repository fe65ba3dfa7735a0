"""
Inventory Management Application

MODELS:
- Category: product categories with a type and an active/inactive/draft status
- Product: sellable products with a unique product_id and on-hand stock_qty
- StockEntry: every stock movement, so stock_qty == sum(entry quantities)

BUSINESS LOGIC:
- Opening stock is recorded when a product is created
- Editing stock_qty directly records an 'adjustment' entry
- Orders deduct / restore stock through inventory.services.ledger.adjust()

USAGE:
    from inventory.models import Category, Product
    from inventory.services.ledger import deduct, restore

    phones = Category.objects.create(name="Phones", category_type="mobile")
    phone = Product.objects.create(name="Galaxy A15", category=phones, stock_qty=10)

    deduct(phone.product_id, 3, reference_id="2610001")   # stock 10 -> 7
    restore(phone.product_id, 1, reference_id="2610001")  # stock 7 -> 8
"""

__version__ = '1.0.0'
