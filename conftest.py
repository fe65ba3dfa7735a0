from decimal import Decimal

import pytest
from django.contrib.auth import get_user_model
from rest_framework.test import APIClient

from inventory.models import Category, Product


@pytest.fixture
def api_client():
    return APIClient()


@pytest.fixture
def user(db):
    return get_user_model().objects.create_user(
        username='cashier', email='cashier@example.com', password='Str0ng-pass!'
    )


@pytest.fixture
def admin_user(db):
    user = get_user_model().objects.create_user(
        username='boss', email='boss@example.com', password='Str0ng-pass!'
    )
    user.profile.role = 'admin'
    user.profile.save()
    return user


@pytest.fixture
def auth_client(api_client, user):
    api_client.force_authenticate(user=user)
    return api_client


@pytest.fixture
def category(db):
    return Category.objects.create(name='Phones', category_type='mobile')


@pytest.fixture
def make_product(category):
    def make(stock_qty=10, sale_price='100.00', unit_price='80.00', name='Handset'):
        return Product.objects.create(
            name=name,
            category=category,
            unit_price=Decimal(unit_price),
            sale_price=Decimal(sale_price),
            stock_qty=stock_qty,
        )
    return make


@pytest.fixture
def product(make_product):
    return make_product()
