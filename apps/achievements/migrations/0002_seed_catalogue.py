# Generated manually for shared expenses achievements

from django.db import migrations


CATALOGUE = [
    {
        'code': 'first_expense',
        'title': 'First Expense',
        'description': 'Record your first expense',
        'emoji': '🧾',
        'scope': 'global',
        'trigger_event': 'add_expense',
        'condition': {'type': 'count', 'metric': 'expenses', 'target': 1},
    },
    {
        'code': 'expense_tracker',
        'title': 'Expense Tracker',
        'description': 'Record 10 expenses',
        'emoji': '📊',
        'scope': 'global',
        'trigger_event': 'add_expense',
        'condition': {'type': 'count', 'metric': 'expenses', 'target': 10},
    },
    {
        'code': 'group_creator',
        'title': 'Group Creator',
        'description': 'Create your first group',
        'emoji': '👥',
        'scope': 'group',
        'trigger_event': 'create_group',
        'condition': {'type': 'count', 'metric': 'groups', 'target': 1},
    },
    {
        'code': 'social_butterfly',
        'title': 'Social Butterfly',
        'description': 'Invite someone to a group',
        'emoji': '🦋',
        'scope': 'group',
        'trigger_event': 'invite_member',
        'condition': {'type': 'count', 'metric': 'invitations', 'target': 1},
    },
    {
        'code': 'networker',
        'title': 'Networker',
        'description': 'Send 5 invitations',
        'emoji': '🤝',
        'scope': 'group',
        'trigger_event': 'invite_member',
        'condition': {'type': 'count', 'metric': 'invitations', 'target': 5},
    },
    {
        'code': 'budget_master',
        'title': 'Budget Master',
        'description': 'Finish a month under your group budgets',
        'emoji': '💎',
        'scope': 'personal',
        'trigger_event': 'month_end',
        'condition': {'type': 'budget', 'condition': 'under_limit', 'months': 1},
    },
]


def seed_catalogue(apps, schema_editor):
    Achievement = apps.get_model('achievements', 'Achievement')
    for entry in CATALOGUE:
        Achievement.objects.update_or_create(code=entry['code'], defaults=entry)


def remove_catalogue(apps, schema_editor):
    Achievement = apps.get_model('achievements', 'Achievement')
    Achievement.objects.filter(code__in=[entry['code'] for entry in CATALOGUE]).delete()


class Migration(migrations.Migration):

    dependencies = [
        ('achievements', '0001_initial'),
    ]

    operations = [
        migrations.RunPython(seed_catalogue, remove_catalogue),
    ]
