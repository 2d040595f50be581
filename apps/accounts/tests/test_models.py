import pytest
from apps.accounts.models import User
from apps.accounts.signals import ActivityEvent, emit_after_commit, user_activity


@pytest.mark.django_db
class TestUserModel:
    """Tests for the custom user model."""

    def test_display_name_falls_back_to_email_prefix(self, nameless_user):
        """Users without a display name are shown by their email prefix."""
        assert nameless_user.get_display_name() == 'jack.green'

    def test_initials(self, user):
        assert user.get_initials() == 'T'

    def test_create_user_requires_email(self):
        with pytest.raises(ValueError, match='Email is required'):
            User.objects.create_user(email='', password='x')


@pytest.mark.django_db
class TestUserActivitySignal:
    """Tests for post-commit activity emission."""

    def test_emitted_only_after_commit(self, user, django_capture_on_commit_callbacks):
        received = []

        def receiver(sender, user_id, event, **kwargs):
            received.append((user_id, event))

        user_activity.connect(receiver, weak=False)
        try:
            with django_capture_on_commit_callbacks(execute=False) as callbacks:
                emit_after_commit(user_id=user.id, event=ActivityEvent.ADD_EXPENSE)

            # Nothing is sent while the transaction is still open
            assert received == []
            assert len(callbacks) == 1

            callbacks[0]()
            assert received == [(user.id, ActivityEvent.ADD_EXPENSE)]
        finally:
            user_activity.disconnect(receiver)
