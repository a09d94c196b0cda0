from django.urls import path, include
from rest_framework.routers import DefaultRouter
from . import views

app_name = 'groups'

# Router for ViewSets
router = DefaultRouter()
router.register(r'', views.GroupViewSet, basename='group')

urlpatterns = [
    # GET    /api/groups/              - List user's groups
    # POST   /api/groups/              - Create group
    # GET    /api/groups/{id}/         - Get group details
    # GET    /api/groups/{id}/members/ - List members
    path('', include(router.urls)),
]
