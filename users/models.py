import random

from django.conf import settings
from django.db import models
from django.db.models.signals import post_save
from django.dispatch import receiver


class Profile(models.Model):
    ROLE_CHOICES = [
        ("admin", "Admin"),
        ("manager", "Manager"),
        ("agent", "Agent"),
    ]

    GENDER_CHOICES = [
        ("male", "Male"),
        ("female", "Female"),
        ("other", "Other"),
    ]

    user = models.OneToOneField(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="profile")
    role = models.CharField(max_length=20, choices=ROLE_CHOICES, default="agent")
    login_id = models.CharField(max_length=20, unique=True, blank=True)
    phone_number = models.CharField(max_length=30, blank=True, default="")
    gender = models.CharField(max_length=10, choices=GENDER_CHOICES, blank=True, default="")
    current_address = models.CharField(max_length=255, blank=True, default="")
    image_url = models.URLField(max_length=500, blank=True, default="")
    created_at = models.DateTimeField(auto_now_add=True)

    def __str__(self):
        return f"{self.user.username} - {self.role}"

    def save(self, *args, **kwargs):
        if not self.login_id:
            self.login_id = self.generate_login_id()
        super().save(*args, **kwargs)

    @classmethod
    def generate_login_id(cls):
        """USR-NNNN with a random 4 digit number not yet in use."""
        while True:
            login_id = f"USR-{random.randint(1000, 9999)}"
            if not cls.objects.filter(login_id=login_id).exists():
                return login_id

    @property
    def is_admin(self):
        return self.role == "admin"


def is_admin_user(user):
    """Staff users or users whose profile role is admin."""
    if not user or not user.is_authenticated:
        return False
    if user.is_staff:
        return True
    profile = getattr(user, "profile", None)
    return bool(profile and profile.is_admin)


# SIGNALS: auto-create Profile for new users
@receiver(post_save, sender=settings.AUTH_USER_MODEL)
def create_user_profile(sender, instance, created, **kwargs):
    if created:
        Profile.objects.create(user=instance)
