"""
API endpoint tests for transactions app.
"""

import pytest
from decimal import Decimal
from django.urls import reverse
from rest_framework import status

from apps.transactions.models import Transaction, TransactionKind


@pytest.mark.django_db
class TestTransactionList:
    """Tests for GET /api/transactions/."""

    def test_list_personal_by_default(self, payer_client, personal_expense, group_expense):
        """Without ?group the personal scope is listed."""
        response = payer_client.get(reverse('transactions:transaction-list'))

        assert response.status_code == status.HTTP_200_OK
        assert [t['id'] for t in response.data['results']] == [str(personal_expense.id)]

    def test_list_group(self, flatmate_client, flat_group, group_expense):
        """Members see all entries of the group."""
        response = flatmate_client.get(
            reverse('transactions:transaction-list'), {'group': str(flat_group.id)}
        )

        assert response.status_code == status.HTTP_200_OK
        assert response.data['count'] == 1
        assert response.data['results'][0]['title'] == 'Cleaning supplies'

    def test_list_group_as_outsider(self, outsider_client, flat_group, group_expense):
        """Outsiders get 403."""
        response = outsider_client.get(
            reverse('transactions:transaction-list'), {'group': str(flat_group.id)}
        )

        assert response.status_code == status.HTTP_403_FORBIDDEN

    def test_list_invalid_group(self, payer_client):
        """Malformed group ids are a validation error."""
        response = payer_client.get(reverse('transactions:transaction-list'), {'group': 'nope'})

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_list_unauthenticated(self, api_client):
        """Anonymous requests are rejected."""
        response = api_client.get(reverse('transactions:transaction-list'))

        assert response.status_code == status.HTTP_401_UNAUTHORIZED


@pytest.mark.django_db
class TestExpenseCreate:
    """Tests for POST /api/transactions/expenses/."""

    def test_create_split_expense(self, payer_client, flat_group, flatmate):
        """A two-way split returns the per-person share."""
        response = payer_client.post(
            reverse('transactions:transaction-expenses'),
            {
                'title': 'Groceries',
                'amount': '100.00',
                'group': str(flat_group.id),
                'split_with': [str(flatmate.id)],
                'category': 'Food',
            },
            format='json',
        )

        assert response.status_code == status.HTTP_201_CREATED
        assert response.data['share'] == '50.00'
        assert response.data['transaction']['split_between'] == ['Ana Payer', 'Ben Flatmate']
        assert len(response.data['transaction']['splits']) == 2

    def test_create_personal_expense(self, payer_client, expense_payer):
        """Group defaults to the personal scope."""
        response = payer_client.post(
            reverse('transactions:transaction-expenses'),
            {'title': 'Book', 'amount': '12.50'},
            format='json',
        )

        assert response.status_code == status.HTTP_201_CREATED
        assert response.data['share'] is None
        expense = Transaction.objects.get(created_by=expense_payer)
        assert expense.group is None

    def test_create_expense_zero_amount(self, payer_client):
        """Amounts must be positive."""
        response = payer_client.post(
            reverse('transactions:transaction-expenses'),
            {'title': 'Nothing', 'amount': '0'},
            format='json',
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert Transaction.objects.count() == 0

    def test_create_expense_missing_title(self, payer_client):
        """Title is required."""
        response = payer_client.post(
            reverse('transactions:transaction-expenses'), {'amount': '5.00'}, format='json'
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert 'title' in response.data

    def test_create_expense_non_member(self, outsider_client, flat_group):
        """Outsiders cannot record expenses in a group."""
        response = outsider_client.post(
            reverse('transactions:transaction-expenses'),
            {'title': 'Sneaky', 'amount': '5.00', 'group': str(flat_group.id)},
            format='json',
        )

        assert response.status_code == status.HTTP_403_FORBIDDEN


@pytest.mark.django_db
class TestLoanAndSettlementCreate:
    """Tests for the loan and settlement endpoints."""

    def test_create_loan(self, payer_client, flat_group, flatmate):
        """Loans are recorded for the current user."""
        response = payer_client.post(
            reverse('transactions:transaction-loans'),
            {'amount': '20.00', 'loaned_to': str(flatmate.id), 'group': str(flat_group.id)},
            format='json',
        )

        assert response.status_code == status.HTTP_201_CREATED
        assert response.data['kind'] == TransactionKind.LOAN
        assert response.data['loaned_to']['id'] == str(flatmate.id)

    def test_create_loan_to_self(self, payer_client, flat_group, expense_payer):
        """Self-loans are rejected."""
        response = payer_client.post(
            reverse('transactions:transaction-loans'),
            {'amount': '20.00', 'loaned_to': str(expense_payer.id), 'group': str(flat_group.id)},
            format='json',
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_create_settlement(self, flatmate_client, flat_group, expense_payer):
        """Settlements are recorded for the current user."""
        response = flatmate_client.post(
            reverse('transactions:transaction-settlements'),
            {'amount': '15.00', 'paid_to': str(expense_payer.id), 'group': str(flat_group.id)},
            format='json',
        )

        assert response.status_code == status.HTTP_201_CREATED
        assert response.data['kind'] == TransactionKind.SETTLEMENT
        assert Decimal(response.data['amount']) == Decimal('15.00')


@pytest.mark.django_db
class TestTransactionRetrieveDelete:
    """Tests for GET/DELETE /api/transactions/{id}/."""

    def test_retrieve_as_member(self, flatmate_client, group_expense):
        """Members can read group entries."""
        response = flatmate_client.get(
            reverse('transactions:transaction-detail', args=[group_expense.id])
        )

        assert response.status_code == status.HTTP_200_OK

    def test_retrieve_as_outsider(self, outsider_client, group_expense):
        """Outsiders get 403."""
        response = outsider_client.get(
            reverse('transactions:transaction-detail', args=[group_expense.id])
        )

        assert response.status_code == status.HTTP_403_FORBIDDEN

    def test_retrieve_others_personal(self, flatmate_client, personal_expense):
        """Personal entries are private to their creator."""
        response = flatmate_client.get(
            reverse('transactions:transaction-detail', args=[personal_expense.id])
        )

        assert response.status_code == status.HTTP_403_FORBIDDEN

    def test_delete_own(self, payer_client, group_expense):
        """The creator can delete."""
        response = payer_client.delete(
            reverse('transactions:transaction-detail', args=[group_expense.id])
        )

        assert response.status_code == status.HTTP_204_NO_CONTENT
        assert not Transaction.objects.filter(id=group_expense.id).exists()

    def test_delete_others(self, flatmate_client, group_expense):
        """Other members cannot delete."""
        response = flatmate_client.delete(
            reverse('transactions:transaction-detail', args=[group_expense.id])
        )

        assert response.status_code == status.HTTP_403_FORBIDDEN
        assert Transaction.objects.filter(id=group_expense.id).exists()
