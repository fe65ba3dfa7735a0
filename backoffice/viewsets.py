from django.utils.dateparse import parse_date
from rest_framework import status, viewsets
from rest_framework.response import Response

from backoffice.exceptions import ValidationError


def audit_name(request, fallback='system'):
    """Username recorded in created_by / updated_by audit fields."""
    user = getattr(request, 'user', None)
    if user is not None and user.is_authenticated:
        return user.get_username()
    return fallback


def date_param(request, name, required=False):
    """Parse a YYYY-MM-DD query parameter."""
    value = request.query_params.get(name)
    if not value:
        if required:
            raise ValidationError(f'{name} is required', field=name)
        return None
    try:
        parsed = parse_date(value)
    except ValueError:
        parsed = None
    if parsed is None:
        raise ValidationError(f'{name} must be a date in YYYY-MM-DD format', field=name)
    return parsed


class EnvelopeModelViewSet(viewsets.ModelViewSet):
    """
    ModelViewSet whose single-object responses use the API envelope:
    {"success": true, "message": "...", "data": {...}}

    Subclasses set `resource_name` for the messages.
    """
    resource_name = 'Record'

    def create(self, request, *args, **kwargs):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        self.perform_create(serializer)
        return Response({
            'success': True,
            'message': f'{self.resource_name} created successfully',
            'data': serializer.data,
        }, status=status.HTTP_201_CREATED)

    def retrieve(self, request, *args, **kwargs):
        serializer = self.get_serializer(self.get_object())
        return Response({'success': True, 'data': serializer.data})

    def update(self, request, *args, **kwargs):
        partial = kwargs.pop('partial', False)
        instance = self.get_object()
        serializer = self.get_serializer(instance, data=request.data, partial=partial)
        serializer.is_valid(raise_exception=True)
        self.perform_update(serializer)
        return Response({
            'success': True,
            'message': f'{self.resource_name} updated successfully',
            'data': serializer.data,
        })

    def destroy(self, request, *args, **kwargs):
        instance = self.get_object()
        self.perform_destroy(instance)
        return Response({
            'success': True,
            'message': f'{self.resource_name} deleted successfully',
        })
