from django.contrib import admin
from django.contrib.auth import get_user_model
from django.contrib.auth.admin import UserAdmin as BaseUserAdmin

from .models import Profile

User = get_user_model()


class ProfileInline(admin.StackedInline):
    model = Profile
    can_delete = False
    readonly_fields = ['login_id', 'created_at']


class UserAdmin(BaseUserAdmin):
    inlines = [ProfileInline]
    list_display = ['username', 'email', 'role', 'is_active', 'is_staff']

    def get_inline_instances(self, request, obj=None):
        # The profile is created by a post_save signal, edit it only afterwards
        if obj is None:
            return []
        return super().get_inline_instances(request, obj)

    @admin.display(description='Role', ordering='profile__role')
    def role(self, obj):
        profile = getattr(obj, 'profile', None)
        return profile.get_role_display() if profile else '-'


admin.site.unregister(User)
admin.site.register(User, UserAdmin)
