from rest_framework import serializers
from .models import Task


class TaskSerializer(serializers.ModelSerializer):
    """Serializer for income tasks."""

    class Meta:
        model = Task
        fields = [
            'id',
            'name',
            'description',
            'created_at',
            'updated_at',
        ]
        read_only_fields = ['id', 'created_at', 'updated_at']
        # Uniqueness is reported by the service as duplicate_task_name
        extra_kwargs = {'name': {'validators': []}}
