from django.urls import path, include
from rest_framework.routers import DefaultRouter
from . import views

app_name = 'groups'

# Router for ViewSets
router = DefaultRouter()
router.register(r'', views.GroupViewSet, basename='group')

urlpatterns = [
    # Group ViewSet routes
    # GET    /api/groups/              - List groups (personal first)
    # POST   /api/groups/              - Create group
    # GET    /api/groups/{id}/         - Get group details ('personal' allowed)
    # DELETE /api/groups/{id}/         - Delete group (creator)

    # Custom group actions
    # GET    /api/groups/{id}/members/  - List members
    # GET    /api/groups/{id}/invite/   - List pending invitations
    # POST   /api/groups/{id}/invite/   - Issue invitation link
    # PUT    /api/groups/{id}/budget/   - Set monthly budget (admin)

    # Additional endpoints
    path(
        'invitations/<str:token>/accept/',
        views.accept_invitation_view,
        name='accept-invitation'
    ),

    # Include router URLs
    path('', include(router.urls)),
]
