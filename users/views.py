import logging

from django.contrib.auth import authenticate, get_user_model
from rest_framework import permissions, status
from rest_framework.authtoken.models import Token
from rest_framework.decorators import action
from rest_framework.response import Response
from rest_framework.views import APIView

from backoffice.exceptions import ValidationError
from backoffice.viewsets import EnvelopeModelViewSet, audit_name
from .models import is_admin_user
from .serializers import LoginSerializer, RegisterSerializer, UserSerializer, UserUpdateSerializer

logger = logging.getLogger(__name__)

User = get_user_model()


class IsAdminRole(permissions.BasePermission):
    """Staff users or users whose profile role is admin."""

    def has_permission(self, request, view):
        return is_admin_user(request.user)


# ================================
# AUTH
# ================================

class RegisterView(APIView):
    permission_classes = [permissions.AllowAny]

    def post(self, request):
        serializer = RegisterSerializer(data=request.data, context={'request': request})
        serializer.is_valid(raise_exception=True)
        user = serializer.save()
        token, _ = Token.objects.get_or_create(user=user)
        logger.info(f"[USER REGISTERED] {user.username} ({user.profile.login_id}) role={user.profile.role}")
        return Response({
            'success': True,
            'message': 'User registered successfully',
            'data': {'token': token.key, 'user': UserSerializer(user).data},
        }, status=status.HTTP_201_CREATED)


class LoginView(APIView):
    permission_classes = [permissions.AllowAny]

    def post(self, request):
        serializer = LoginSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        identifier = serializer.validated_data['username']

        username = identifier
        if '@' in identifier:
            match = User.objects.filter(email__iexact=identifier).values_list('username', flat=True).first()
            username = match or identifier

        user = authenticate(request, username=username, password=serializer.validated_data['password'])
        if user is None:
            logger.warning(f"[LOGIN FAILED] {identifier}")
            raise ValidationError('Invalid username or password')

        token, _ = Token.objects.get_or_create(user=user)
        logger.info(f"[LOGIN] {user.username}")
        return Response({
            'success': True,
            'message': 'Login successful',
            'data': {'token': token.key, 'user': UserSerializer(user).data},
        })


# ================================
# USERS
# ================================

class UserViewSet(EnvelopeModelViewSet):
    """
    Staff user management. Accounts are created through /register/.
    DELETE removes the user for good; /deactivate/ only disables login.
    """
    queryset = User.objects.select_related('profile').order_by('username')
    resource_name = 'User'
    http_method_names = ['get', 'put', 'patch', 'delete', 'head', 'options']

    def get_serializer_class(self):
        if self.action in ('update', 'partial_update'):
            return UserUpdateSerializer
        return UserSerializer

    def get_permissions(self):
        if self.action in ('destroy', 'deactivate'):
            return [IsAdminRole()]
        return super().get_permissions()

    def get_queryset(self):
        queryset = super().get_queryset()
        if self.action == 'list' and self.request.query_params.get('active') in ('1', 'true', 'True'):
            queryset = queryset.filter(is_active=True)
        return queryset

    def perform_update(self, serializer):
        user = serializer.save()
        logger.info(f"[USER UPDATED] {user.username} by {audit_name(self.request)}")

    def perform_destroy(self, instance):
        if instance == self.request.user:
            raise ValidationError('You cannot delete your own account')
        logger.warning(f"[USER DELETED] {instance.username} permanently deleted by {audit_name(self.request)}")
        instance.delete()

    @action(detail=True, methods=['put', 'patch'])
    def deactivate(self, request, pk=None):
        user = self.get_object()
        if user == request.user:
            raise ValidationError('You cannot deactivate your own account')
        user.is_active = False
        user.save(update_fields=['is_active'])
        Token.objects.filter(user=user).delete()
        logger.info(f"[USER DEACTIVATED] {user.username} by {audit_name(request)}")
        return Response({
            'success': True,
            'message': 'User deactivated successfully',
            'data': UserSerializer(user).data,
        })
