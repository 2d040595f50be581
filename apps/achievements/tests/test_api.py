"""
API endpoint tests for achievements app.
"""

import pytest
from django.urls import reverse
from rest_framework import status

from apps.achievements.models import Achievement, UserAchievement


@pytest.mark.django_db
class TestAchievementCatalogue:
    """Tests for GET /api/achievements/."""

    def test_seeded_catalogue(self, achiever_client):
        """The seeded badges are listed, all locked for a new user."""
        response = achiever_client.get(reverse('achievements:achievement-list'))

        assert response.status_code == status.HTTP_200_OK
        codes = {item['code'] for item in response.data}
        assert codes == {
            'first_expense',
            'expense_tracker',
            'group_creator',
            'social_butterfly',
            'networker',
            'budget_master',
        }
        assert not any(item['unlocked'] for item in response.data)

    def test_unlock_state(self, achiever_client, achiever):
        """Unlocked badges carry their timestamp."""
        achievement = Achievement.objects.get(code='first_expense')
        UserAchievement.objects.create(user=achiever, achievement=achievement)

        response = achiever_client.get(reverse('achievements:achievement-list'))

        item = next(i for i in response.data if i['code'] == 'first_expense')
        assert item['unlocked'] is True
        assert item['unlocked_at'] is not None

    def test_unauthenticated(self, api_client):
        """Anonymous requests are rejected."""
        response = api_client.get(reverse('achievements:achievement-list'))

        assert response.status_code == status.HTTP_401_UNAUTHORIZED


@pytest.mark.django_db
class TestMyAchievements:
    """Tests for GET /api/achievements/me/."""

    def test_only_own_unlocks(self, achiever_client, achiever, stranger):
        """Other users' unlocks are not listed."""
        networker = Achievement.objects.get(code='networker')
        UserAchievement.objects.create(user=achiever, achievement=networker)
        UserAchievement.objects.create(
            user=stranger, achievement=Achievement.objects.get(code='group_creator')
        )

        response = achiever_client.get(reverse('achievements:my-achievements'))

        assert response.status_code == status.HTTP_200_OK
        assert [item['code'] for item in response.data] == ['networker']
        assert response.data[0]['title'] == 'Networker'

    def test_empty(self, achiever_client):
        """New users have nothing unlocked."""
        response = achiever_client.get(reverse('achievements:my-achievements'))

        assert response.data == []
