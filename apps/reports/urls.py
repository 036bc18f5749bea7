from django.urls import path
from . import views

app_name = 'reports'

urlpatterns = [
    # GET  /api/reports/financials/          - Live totals (manager/admin)
    # POST /api/reports/publish/             - Publish snapshot (manager/admin)
    # GET  /api/reports/published/           - Latest snapshot (public)
    # GET  /api/reports/published/history/   - All snapshots (manager/admin)
    path('financials/', views.financials, name='financials'),
    path('publish/', views.publish, name='publish'),
    path('published/', views.published, name='published'),
    path('published/history/', views.published_history, name='published-history'),
]
