"""
API endpoint tests for budgets app.
"""

import pytest
from decimal import Decimal
from django.urls import reverse
from rest_framework import status

from apps.budgets.models import Budget


@pytest.mark.django_db
class TestMyBudget:
    """Tests for GET/PUT /api/budgets/me/."""

    def test_get_unset(self, owner_client):
        """Unset budgets are reported as null."""
        response = owner_client.get(reverse('budgets:my-budget'))

        assert response.status_code == status.HTTP_200_OK
        assert response.data['amount'] is None

    def test_put_then_get(self, owner_client, budget_owner):
        """PUT upserts, GET reads back."""
        response = owner_client.put(reverse('budgets:my-budget'), {'amount': '750.00'}, format='json')
        assert response.status_code == status.HTTP_200_OK

        response = owner_client.put(reverse('budgets:my-budget'), {'amount': '800.00'}, format='json')
        assert response.status_code == status.HTTP_200_OK

        response = owner_client.get(reverse('budgets:my-budget'))
        assert response.data['amount'] == '800.00'
        assert Budget.objects.get(user=budget_owner).amount == Decimal('800.00')

    def test_put_negative(self, owner_client):
        """Negative budgets are rejected."""
        response = owner_client.put(reverse('budgets:my-budget'), {'amount': '-10'}, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert Budget.objects.count() == 0

    def test_unauthenticated(self, api_client):
        """Anonymous requests are rejected."""
        response = api_client.get(reverse('budgets:my-budget'))

        assert response.status_code == status.HTTP_401_UNAUTHORIZED
