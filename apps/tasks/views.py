from rest_framework import viewsets, status
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from apps.accounts.capabilities import Capability
from apps.accounts.permissions import HasRoleCapability
from .models import Task
from .serializers import TaskSerializer
from .services import create_task, update_task, delete_task


class TaskViewSet(viewsets.ModelViewSet):
    """
    ViewSet for income tasks.

    Every authenticated role can read tasks (collectors need them to issue
    receipts); only managers and admins can change them.
    """

    queryset = Task.objects.all()
    serializer_class = TaskSerializer
    permission_classes = [IsAuthenticated, HasRoleCapability]
    capabilities = {
        'list': Capability.VIEW_TASKS,
        'retrieve': Capability.VIEW_TASKS,
        'create': Capability.MANAGE_TASKS,
        'update': Capability.MANAGE_TASKS,
        'partial_update': Capability.MANAGE_TASKS,
        'destroy': Capability.MANAGE_TASKS,
    }

    def create(self, request, *args, **kwargs):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        task = create_task(actor=request.user, **serializer.validated_data)

        return Response(TaskSerializer(task).data, status=status.HTTP_201_CREATED)

    def update(self, request, *args, **kwargs):
        partial = kwargs.pop('partial', False)
        task = self.get_object()
        serializer = self.get_serializer(task, data=request.data, partial=partial)
        serializer.is_valid(raise_exception=True)

        task = update_task(actor=request.user, task_id=task.id, **serializer.validated_data)

        return Response(TaskSerializer(task).data)

    def destroy(self, request, *args, **kwargs):
        delete_task(actor=request.user, task_id=self.kwargs['pk'])
        return Response(status=status.HTTP_204_NO_CONTENT)
