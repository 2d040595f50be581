from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from drf_spectacular.utils import extend_schema

from .models import Achievement, UserAchievement
from .serializers import AchievementSerializer, UserAchievementSerializer


@extend_schema(
    responses={200: AchievementSerializer(many=True)},
    description="List the achievement catalogue with the current user's unlock state.",
    tags=['achievements'],
)
@api_view(['GET'])
@permission_classes([IsAuthenticated])
def achievement_list(request):
    """Achievement catalogue - thin HTTP handler."""
    unlocked = dict(
        UserAchievement.objects
        .filter(user=request.user)
        .values_list('achievement_id', 'unlocked_at')
    )
    serializer = AchievementSerializer(
        Achievement.objects.all(),
        many=True,
        context={'request': request, 'unlocked': unlocked},
    )
    return Response(serializer.data)


@extend_schema(
    responses={200: UserAchievementSerializer(many=True)},
    description="List the achievements the current user has unlocked, newest first.",
    tags=['achievements'],
)
@api_view(['GET'])
@permission_classes([IsAuthenticated])
def my_achievements(request):
    """Unlocked achievements of the current user."""
    unlocks = (
        UserAchievement.objects
        .filter(user=request.user)
        .select_related('achievement')
        .order_by('-unlocked_at')
    )
    return Response(UserAchievementSerializer(unlocks, many=True).data)
