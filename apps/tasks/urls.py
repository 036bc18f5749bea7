from django.urls import path, include
from rest_framework.routers import DefaultRouter
from . import views

app_name = 'tasks'

router = DefaultRouter()
router.register(r'', views.TaskViewSet, basename='task')

urlpatterns = [
    # GET    /api/tasks/        - List tasks
    # POST   /api/tasks/        - Create task (manager/admin)
    # GET    /api/tasks/{id}/   - Get task
    # PUT    /api/tasks/{id}/   - Update task (manager/admin)
    # PATCH  /api/tasks/{id}/   - Partial update (manager/admin)
    # DELETE /api/tasks/{id}/   - Delete unused task (manager/admin)
    path('', include(router.urls)),
]
