from django.urls import path
from . import views

app_name = 'achievements'

urlpatterns = [
    # GET /api/achievements/ - Catalogue with unlock state
    path('', views.achievement_list, name='achievement-list'),
    # GET /api/achievements/me/ - Unlocked achievements
    path('me/', views.my_achievements, name='my-achievements'),
]
