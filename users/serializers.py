from django.contrib.auth import get_user_model
from django.contrib.auth.password_validation import validate_password
from django.db import transaction
from rest_framework import serializers
from rest_framework.exceptions import PermissionDenied

from .models import Profile, is_admin_user

User = get_user_model()


class ProfileSerializer(serializers.ModelSerializer):
    class Meta:
        model = Profile
        fields = ['login_id', 'role', 'phone_number', 'gender', 'current_address', 'image_url', 'created_at']
        read_only_fields = ['login_id', 'created_at']


class UserSerializer(serializers.ModelSerializer):
    profile = ProfileSerializer(read_only=True)

    class Meta:
        model = User
        fields = ['id', 'username', 'email', 'first_name', 'last_name', 'is_active', 'is_staff', 'date_joined', 'profile']
        read_only_fields = ['id', 'is_active', 'is_staff', 'date_joined']


class RegisterSerializer(serializers.Serializer):
    username = serializers.CharField(max_length=150)
    email = serializers.EmailField()
    password = serializers.CharField(write_only=True, min_length=8)
    first_name = serializers.CharField(max_length=150, required=False, allow_blank=True)
    last_name = serializers.CharField(max_length=150, required=False, allow_blank=True)
    phone_number = serializers.CharField(max_length=30)
    gender = serializers.ChoiceField(choices=Profile.GENDER_CHOICES)
    current_address = serializers.CharField(max_length=255)
    role = serializers.ChoiceField(choices=Profile.ROLE_CHOICES, default='agent')

    def validate_username(self, value):
        if User.objects.filter(username__iexact=value).exists():
            raise serializers.ValidationError('Username already exists')
        return value

    def validate_email(self, value):
        if User.objects.filter(email__iexact=value).exists():
            raise serializers.ValidationError('Email already exists')
        return value.lower()

    def validate_phone_number(self, value):
        if Profile.objects.filter(phone_number=value).exists():
            raise serializers.ValidationError('Phone number already exists')
        return value

    def validate_password(self, value):
        validate_password(value)
        return value

    def validate_role(self, value):
        request = self.context.get('request')
        if value != 'agent' and not is_admin_user(getattr(request, 'user', None)):
            raise PermissionDenied('Only admins can register users with a higher role')
        return value

    @transaction.atomic
    def create(self, validated_data):
        profile_data = {
            field: validated_data.pop(field)
            for field in ('phone_number', 'gender', 'current_address', 'role')
        }
        user = User.objects.create_user(**validated_data)
        Profile.objects.filter(user=user).update(**profile_data)
        user.profile.refresh_from_db()
        return user


class LoginSerializer(serializers.Serializer):
    """Username or email plus password"""
    username = serializers.CharField()
    password = serializers.CharField(write_only=True)


class UserUpdateSerializer(serializers.ModelSerializer):
    phone_number = serializers.CharField(source='profile.phone_number', max_length=30, required=False)
    gender = serializers.ChoiceField(source='profile.gender', choices=Profile.GENDER_CHOICES, required=False)
    current_address = serializers.CharField(source='profile.current_address', max_length=255, required=False)
    role = serializers.ChoiceField(source='profile.role', choices=Profile.ROLE_CHOICES, required=False)
    image_url = serializers.URLField(source='profile.image_url', max_length=500, required=False, allow_blank=True)

    class Meta:
        model = User
        fields = ['email', 'first_name', 'last_name', 'phone_number', 'gender', 'current_address', 'role', 'image_url']

    def validate_email(self, value):
        if User.objects.filter(email__iexact=value).exclude(pk=self.instance.pk).exists():
            raise serializers.ValidationError('Email already exists')
        return value.lower()

    def validate_phone_number(self, value):
        if Profile.objects.filter(phone_number=value).exclude(user=self.instance).exists():
            raise serializers.ValidationError('Phone number already exists')
        return value

    def validate_role(self, value):
        request = self.context.get('request')
        if value != self.instance.profile.role and not is_admin_user(getattr(request, 'user', None)):
            raise PermissionDenied("Only admins can change a user's role")
        return value

    @transaction.atomic
    def update(self, instance, validated_data):
        profile_data = validated_data.pop('profile', {})
        user = super().update(instance, validated_data)
        if profile_data:
            for field, value in profile_data.items():
                setattr(user.profile, field, value)
            user.profile.save()
        return user

    def to_representation(self, instance):
        return UserSerializer(instance).data
