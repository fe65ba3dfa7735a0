from django.apps import AppConfig


class UsersConfig(AppConfig):
    """Staff accounts: Django users with a Profile (role, login id, contact details)."""

    default_auto_field = 'django.db.models.BigAutoField'
    name = 'users'
    verbose_name = 'Users'
