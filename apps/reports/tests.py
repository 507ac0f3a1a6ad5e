# apps/reports/tests.py

import csv
import io
from datetime import date, timedelta

from django.test import TestCase
from django.utils import timezone

from apps.core.models import Project
from apps.core.tests.helpers import ApiClientMixin, make_project, make_user

from .utils import EXPORT_HEADERS, calculate_summary


class SummaryTestCase(ApiClientMixin, TestCase):
    """ Dashboard counters. """

    def setUp(self) -> None:
        self.user = make_user()
        self.today = timezone.localdate()

    def test_counts(self):
        make_project(self.user, name='Late', due_date=self.today - timedelta(days=3))
        make_project(self.user, name='Late but done', status=Project.STATUS_COMPLETED,
                     due_date=self.today - timedelta(days=3))
        make_project(self.user, name='Soon', priority=Project.PRIORITY_HIGH,
                     status=Project.STATUS_IN_PROGRESS, due_date=self.today + timedelta(days=2))
        make_project(self.user, name='Far', priority=Project.PRIORITY_LOW, due_date=self.today + timedelta(days=60))
        make_project(make_user(email='other@example.com', name='Other'), name='Foreign',
                     due_date=self.today - timedelta(days=1))

        response = self.get_json('/api/reports/summary', user=self.user)

        self.assertEqual(response.status_code, 200)
        summary = response.json()['data']['summary']
        self.assertEqual(summary['total'], 4)
        self.assertEqual(summary['byStatus'], {'Planning': 2, 'In Progress': 1, 'Completed': 1})
        self.assertEqual(summary['byPriority'], {'High': 1, 'Medium': 2, 'Low': 1})
        self.assertEqual(summary['overdue'], 1)
        self.assertEqual(summary['dueSoon'], 1)
        self.assertEqual([p['name'] for p in summary['urgent']], ['Late', 'Soon', 'Far'])

    def test_urgent_ties_broken_by_priority(self):
        due = self.today + timedelta(days=1)
        make_project(self.user, name='Low', priority=Project.PRIORITY_LOW, due_date=due)
        make_project(self.user, name='High', priority=Project.PRIORITY_HIGH, due_date=due)
        make_project(self.user, name='Medium', priority=Project.PRIORITY_MEDIUM, due_date=due)

        summary = calculate_summary(self.user.get_accessible_projects(), today=self.today)

        self.assertEqual([p['name'] for p in summary['urgent']], ['High', 'Medium', 'Low'])

    def test_urgent_is_capped(self):
        for i in range(12):
            make_project(self.user, name=f'P{i}', due_date=self.today + timedelta(days=i))

        summary = calculate_summary(self.user.get_accessible_projects(), today=self.today)

        self.assertEqual(len(summary['urgent']), 8)

    def test_requires_token(self):
        self.assertEqual(self.client.get('/api/reports/summary').status_code, 401)


class ExportTestCase(ApiClientMixin, TestCase):
    """ CSV and Excel exports. """

    def setUp(self) -> None:
        self.user = make_user()
        make_project(
            self.user,
            name='Website',
            description='Marketing site',
            status=Project.STATUS_IN_PROGRESS,
            priority=Project.PRIORITY_HIGH,
            assignees=['a@example.com', 'b@example.com'],
            due_date=date(2030, 4, 1),
        )
        make_project(self.user, name='Archive', status=Project.STATUS_COMPLETED)
        make_project(make_user(email='other@example.com', name='Other'), name='Foreign')

    def test_csv(self):
        response = self.get_json('/api/reports/projects.csv', user=self.user)

        self.assertEqual(response.status_code, 200)
        self.assertTrue(response['Content-Type'].startswith('text/csv'))
        self.assertIn('attachment; filename="projects.csv"', response['Content-Disposition'])

        content = response.content.decode('utf-8-sig')
        rows = list(csv.reader(io.StringIO(content)))
        self.assertEqual(rows[0], EXPORT_HEADERS)
        self.assertEqual(len(rows), 3)

        website = next(row for row in rows if row[0] == 'Website')
        self.assertEqual(website[1:6], ['Marketing site', 'In Progress', 'High', 'a@example.com, b@example.com', '2030-04-01'])

    def test_csv_respects_filters(self):
        response = self.get_json('/api/reports/projects.csv', user=self.user, params={'status': 'Completed'})

        rows = list(csv.reader(io.StringIO(response.content.decode('utf-8-sig'))))
        self.assertEqual([row[0] for row in rows[1:]], ['Archive'])

    def test_excel(self):
        response = self.get_json('/api/reports/projects.xlsx', user=self.user)

        self.assertEqual(response.status_code, 200)
        self.assertEqual(
            response['Content-Type'],
            'application/vnd.openxmlformats-officedocument.spreadsheetml.sheet',
        )
        self.assertIn('attachment; filename="projects.xlsx"', response['Content-Disposition'])
        # XLSX files are zip archives
        self.assertEqual(response.content[:2], b'PK')

    def test_exports_require_token(self):
        self.assertEqual(self.client.get('/api/reports/projects.csv').status_code, 401)
        self.assertEqual(self.client.get('/api/reports/projects.xlsx').status_code, 401)
