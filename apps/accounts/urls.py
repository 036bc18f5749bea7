from django.urls import path, include
from rest_framework.routers import DefaultRouter
from . import views

app_name = 'users'

router = DefaultRouter()
router.register(r'users', views.UserViewSet, basename='user')

urlpatterns = [
    # Authentication
    path('auth/login/', views.login, name='login'),
    path('auth/user/', views.get_current_user, name='current-user'),

    # User management
    # GET    /api/users/        - List users (manager/admin)
    # POST   /api/users/        - Create user (admin)
    # GET    /api/users/{id}/   - Get user (manager/admin)
    # DELETE /api/users/{id}/   - Delete user (admin)
    path('', include(router.urls)),
]
