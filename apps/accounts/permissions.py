"""
DRF permission classes backed by role capabilities.

Views declare which capability each action needs; this class looks it up and
asks ``apps.accounts.capabilities.can``. Nothing here re-derives role rules.

Usage:
    class ReceiptBookViewSet(viewsets.ModelViewSet):
        permission_classes = [IsAuthenticated, HasRoleCapability]
        capabilities = {
            'create': Capability.MANAGE_BOOKS,
            'assign': Capability.MANAGE_BOOKS,
        }
        object_capabilities = {
            'retrieve': Capability.VIEW_BOOK,
        }
"""
from rest_framework.permissions import BasePermission

from .capabilities import can


class HasRoleCapability(BasePermission):
    """
    Permission that checks the capability mapped to the current view action.

    ``view.capabilities`` is consulted in ``has_permission`` (role level) and
    ``view.object_capabilities`` in ``has_object_permission`` (with the object
    as the resource). Classes built by ``capability_required`` carry a fixed
    ``required`` capability instead. Actions with no mapping are allowed.
    """

    message = 'Your role is not allowed to perform this action.'
    required = None

    def _lookup(self, request, view, attribute):
        mapping = getattr(view, attribute, None) or {}
        action = getattr(view, 'action', None) or request.method.lower()
        return mapping.get(action, mapping.get('*'))

    def has_permission(self, request, view):
        """Check role-level capability for the action."""
        capability = self.required or self._lookup(request, view, 'capabilities')
        if capability is None:
            return True
        return can(request.user, capability)

    def has_object_permission(self, request, view, obj):
        """Check resource-level capability for the action."""
        capability = self._lookup(request, view, 'object_capabilities')
        if capability is None:
            return True
        return can(request.user, capability, obj)


def capability_required(capability):
    """
    Build a permission class that requires ``capability`` on every request.

    Meant for function-based views, which have no ``action``::

        @api_view(['POST'])
        @permission_classes([IsAuthenticated, capability_required(Capability.PUBLISH_REPORT)])
        def publish(request):
            ...
    """
    return type(
        f'Requires{capability.name.title().replace("_", "")}',
        (HasRoleCapability,),
        {'required': capability},
    )
