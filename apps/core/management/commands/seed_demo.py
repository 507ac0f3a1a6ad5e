# apps/core/management/commands/seed_demo.py

import random
from datetime import timedelta

from django.core.management.base import BaseCommand
from django.db import transaction
from django.utils import timezone

from apps.core.models import Project, User

DEMO_PASSWORD = 'password123'

SAMPLE_USERS = [
    ('John Doe', 'john.doe@example.com'),
    ('Jane Smith', 'jane.smith@example.com'),
    ('Bob Johnson', 'bob.johnson@example.com'),
    ('Alice Williams', 'alice.williams@example.com'),
    ('Charlie Brown', 'charlie.brown@example.com'),
    ('Diana Prince', 'diana.prince@example.com'),
    ('Frank Miller', 'frank.miller@example.com'),
    ('Grace Lee', 'grace.lee@example.com'),
    ('Henry Wilson', 'henry.wilson@example.com'),
    ('Ivy Chen', 'ivy.chen@example.com'),
    ('Jack Taylor', 'jack.taylor@example.com'),
    ('Kate Anderson', 'kate.anderson@example.com'),
]

PROJECT_TEMPLATES = [
    ('E-commerce Platform', 'Build a modern e-commerce platform with payment integration'),
    ('Mobile App Redesign', 'Redesign the mobile app UI/UX for better user experience'),
    ('API Integration', 'Integrate third-party API for payment processing'),
    ('Database Migration', 'Migrate database from MySQL to PostgreSQL'),
    ('Security Audit', 'Conduct comprehensive security audit of the application'),
    ('Performance Optimization', 'Optimize application performance and reduce load times'),
    ('User Dashboard', 'Create a comprehensive user dashboard with analytics'),
    ('Email Notification System', 'Implement email notification system for user events'),
    ('Documentation Update', 'Update project documentation and API references'),
    ('Testing Suite', 'Create comprehensive testing suite for all modules'),
    ('CI/CD Pipeline', 'Set up continuous integration and deployment pipeline'),
    ('Monitoring System', 'Implement application monitoring and logging system'),
    ('Backup System', 'Set up automated backup system for database'),
    ('Code Review Process', 'Establish code review process and guidelines'),
    ('Feature Flags', 'Implement feature flag system for gradual rollouts'),
]

PROJECT_COUNT = 15


class Command(BaseCommand):
    help = 'Populates the database with demo users and projects'

    def add_arguments(self, parser):
        parser.add_argument(
            '--keep',
            action='store_true',
            help='Keep existing users and projects instead of clearing them'
        )
        parser.add_argument(
            '--seed',
            type=int,
            default=None,
            help='Random seed, for reproducible data'
        )

    def handle(self, *args, **options):
        """
        Creates 12 users and 15 projects

        The first user owns the first five projects and is assigned to the
        first ten, which makes it the account to log in with.
        """
        rng = random.Random(options['seed'])

        self.stdout.write('🌱 Starting seed...')

        with transaction.atomic():
            if not options['keep']:
                self._clear_data()

            users = self._create_users()
            projects = self._create_projects(users, rng)

        primary = users[0]
        self.stdout.write(
            self.style.SUCCESS(
                f'\n✅ Seed completed!\n'
                f'  - Users: {len(users)}\n'
                f'  - Projects: {len(projects)}\n'
                f'\n'
                f'Recommended login (assigned to most projects):\n'
                f'  Email: {primary.email}\n'
                f'  Password: {DEMO_PASSWORD}\n'
                f'\n'
                f'All demo users share the same password.\n'
            )
        )

    def _clear_data(self):
        """Projects first: users are protected while they own any"""
        self.stdout.write('  🗑️  Clearing existing data...')

        projects_deleted, _ = Project.objects.all().delete()
        users_deleted, _ = User.objects.filter(is_superuser=False).delete()

        self.stdout.write(f'     {projects_deleted} project rows, {users_deleted} user rows removed')

    def _create_users(self):
        self.stdout.write('  👥 Creating users...')

        users = []
        for name, email in SAMPLE_USERS:
            user = User.objects.filter(email__iexact=email).first()
            if user is None:
                user = User.objects.create_user(email=email, password=DEMO_PASSWORD, name=name)
                self.stdout.write(f'     ✓ {user.name} ({user.email})')
            else:
                self.stdout.write(f'     = {user.name} ({user.email}) already exists')
            users.append(user)

        return users

    def _create_projects(self, users, rng):
        self.stdout.write('  📋 Creating projects...')

        primary = users[0]
        others = users[1:]
        statuses = [choice for choice, _ in Project.STATUS_CHOICES]
        today = timezone.localdate()

        projects = []
        for i in range(PROJECT_COUNT):
            name, description = PROJECT_TEMPLATES[i % len(PROJECT_TEMPLATES)]

            if i < 5:
                priority = Project.PRIORITY_HIGH
            elif i < 10:
                priority = Project.PRIORITY_MEDIUM
            else:
                priority = Project.PRIORITY_LOW

            if i < 10:
                assignees = [primary.email] + [u.email for u in rng.sample(others, rng.randint(0, 2))]
            else:
                assignees = [u.email for u in rng.sample(users, rng.randint(1, 3))]

            owner = primary if i < 5 else rng.choice(users)

            project = Project.objects.create(
                name=f'{name} {i + 1}' if i > 0 else name,
                description=description,
                status=rng.choice(statuses),
                priority=priority,
                due_date=today + timedelta(days=rng.randint(0, 89)),
                created_by=owner,
            )
            project.set_assignees(assignees)
            projects.append(project)

            self.stdout.write(f'     ✓ {project.name} ({project.status})')

        return projects
