from datetime import timedelta

from django.core.management.base import BaseCommand
from django.utils import timezone

from apps.identity.models import User
from apps.identity.services import UserService
from apps.tasks.models import Task
from apps.tasks.services import TaskService

DEMO_PASSWORD = 'password'

DEMO_USERS = [
    {'username': 'alice', 'email': 'alice@example.com'},
    {'username': 'bob', 'email': 'bob@example.com'},
    {'username': 'carol', 'email': 'carol@example.com'},
]

# (title, description, assignee username, due in days; negative = overdue)
DEMO_TASKS = [
    ('Write quarterly report', 'Summarize Q3 numbers for the board', 'alice', 7),
    ('Fix login redirect', 'Users land on a blank page after login', 'bob', -2),
    ('Plan team offsite', 'Book venue and collect dietary needs', 'carol', 30),
    ('Review pull requests', 'Backlog of open reviews', 'alice', -1),
    ('Update onboarding docs', 'Describe the new deployment flow', 'bob', 14),
]


class Command(BaseCommand):
    help = 'Seeds the database with demo users and tasks.'

    def add_arguments(self, parser):
        parser.add_argument(
            '--clean',
            action='store_true',
            help='Delete existing users and tasks before seeding',
        )

    def handle(self, *args, **options):
        if options['clean']:
            self.stdout.write(self.style.WARNING('Cleaning database...'))
            Task.objects.all().delete()
            User.objects.all().delete()
            self.stdout.write(self.style.SUCCESS('Database cleaned.'))

        users = self._seed_users()
        self._seed_tasks(users)

    def _seed_users(self) -> dict:
        service = UserService()
        users = {}
        for u in DEMO_USERS:
            existing = service.users.get_by_email(u['email'])
            if existing:
                users[u['username']] = existing
                self.stdout.write(self.style.WARNING(f'User exists: {u["email"]}'))
                continue
            users[u['username']] = service.create(u['username'], u['email'], DEMO_PASSWORD)
            self.stdout.write(self.style.SUCCESS(f'Created user: {u["email"]}'))
        return users

    def _seed_tasks(self, users: dict) -> None:
        service = TaskService()
        now = timezone.now()
        existing_titles = set(Task.objects.values_list('title', flat=True))

        for title, description, username, due_in_days in DEMO_TASKS:
            if title in existing_titles:
                continue
            service.create(
                title=title,
                description=description,
                assignee_id=users[username].id,
                due_date=now + timedelta(days=due_in_days),
            )
            self.stdout.write(self.style.SUCCESS(f'Created task: {title}'))
