from rest_framework import serializers
from .models import Achievement, UserAchievement


class AchievementSerializer(serializers.ModelSerializer):
    """
    Catalogue entry with the current user's unlock state.

    Expects ``unlocked`` in context: a mapping of achievement id to
    unlock timestamp.
    """

    unlocked = serializers.SerializerMethodField()
    unlocked_at = serializers.SerializerMethodField()

    class Meta:
        model = Achievement
        fields = [
            'id',
            'code',
            'title',
            'description',
            'emoji',
            'scope',
            'trigger_event',
            'condition',
            'unlocked',
            'unlocked_at',
        ]
        read_only_fields = fields

    def get_unlocked(self, obj) -> bool:
        return obj.id in self.context.get('unlocked', {})

    def get_unlocked_at(self, obj):
        unlocked_at = self.context.get('unlocked', {}).get(obj.id)
        return unlocked_at.isoformat() if unlocked_at else None


class UserAchievementSerializer(serializers.ModelSerializer):
    """An unlocked achievement."""

    code = serializers.CharField(source='achievement.code', read_only=True)
    title = serializers.CharField(source='achievement.title', read_only=True)
    description = serializers.CharField(source='achievement.description', read_only=True)
    emoji = serializers.CharField(source='achievement.emoji', read_only=True)

    class Meta:
        model = UserAchievement
        fields = ['id', 'code', 'title', 'description', 'emoji', 'unlocked_at']
        read_only_fields = fields
