# apps/core/tests/test_projects.py

import uuid
from datetime import date
from unittest import mock

from django.test import TestCase

from apps.core.models import Project

from .helpers import ApiClientMixin, make_project, make_user


class ProjectCreateTestCase(ApiClientMixin, TestCase):
    """ Project creation. """

    url = '/api/projects'

    def setUp(self) -> None:
        self.user = make_user()

    def test_create_with_defaults(self):
        response = self.send_json('post', self.url, {'name': ' Launch ', 'dueDate': '2030-03-01'}, user=self.user)

        self.assertEqual(response.status_code, 201)
        body = response.json()
        self.assertEqual(body['message'], 'Project created successfully')

        project = body['data']['project']
        self.assertEqual(project['name'], 'Launch')
        self.assertEqual(project['description'], '')
        self.assertEqual(project['status'], 'Planning')
        self.assertEqual(project['priority'], 'Medium')
        self.assertEqual(project['assignees'], [])
        self.assertEqual(project['dueDate'], '2030-03-01')
        self.assertEqual(project['createdBy'], {'_id': str(self.user.pk), 'email': self.user.email, 'name': 'Owner'})

    def test_create_full_payload(self):
        response = self.send_json('post', self.url, {
            'name': 'Website',
            'description': 'Marketing site',
            'status': 'In Progress',
            'priority': 'High',
            'assignees': ['b@example.com', 'a@example.com'],
            'dueDate': '2030-03-01T00:00:00.000Z',
        }, user=self.user)

        self.assertEqual(response.status_code, 201)
        project = response.json()['data']['project']
        self.assertEqual(project['status'], 'In Progress')
        self.assertEqual(project['priority'], 'High')
        self.assertEqual(project['assignees'], ['b@example.com', 'a@example.com'])
        self.assertEqual(project['dueDate'], '2030-03-01')

    def test_name_and_due_date_required(self):
        response = self.send_json('post', self.url, {'name': 'No date'}, user=self.user)

        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()['message'], 'Name and due date are required')
        self.assertFalse(Project.objects.exists())

    def test_invalid_status(self):
        response = self.send_json('post', self.url, {'name': 'P', 'dueDate': '2030-01-01', 'status': 'Done'}, user=self.user)

        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()['message'], 'Status must be one of: Planning, In Progress, Completed')

    def test_invalid_priority(self):
        response = self.send_json('post', self.url, {'name': 'P', 'dueDate': '2030-01-01', 'priority': 'Urgent'}, user=self.user)

        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()['message'], 'Priority must be one of: High, Medium, Low')

    def test_invalid_assignee(self):
        response = self.send_json('post', self.url, {
            'name': 'P', 'dueDate': '2030-01-01', 'assignees': ['ok@example.com', 'broken'],
        }, user=self.user)

        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()['message'], 'All assignees must be valid email addresses')

    def test_overlong_assignee(self):
        email = 'a' * 250 + '@example.com'

        response = self.send_json('post', self.url, {'name': 'P', 'dueDate': '2030-01-01', 'assignees': [email]}, user=self.user)

        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()['message'], 'All assignees must be valid email addresses')
        self.assertFalse(Project.objects.exists())

    def test_non_string_name(self):
        response = self.send_json('post', self.url, {'name': ['Launch'], 'dueDate': '2030-01-01'}, user=self.user)

        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()['message'], 'Project name must be a string')
        self.assertFalse(Project.objects.exists())

    def test_invalid_due_date(self):
        response = self.send_json('post', self.url, {'name': 'P', 'dueDate': 'tomorrow'}, user=self.user)

        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()['message'], 'Due date must be a valid date')

    def test_requires_token(self):
        response = self.send_json('post', self.url, {'name': 'P', 'dueDate': '2030-01-01'})

        self.assertEqual(response.status_code, 401)

    def test_create_broadcasts_event(self):
        with mock.patch('apps.core.views.broadcast_project_event') as broadcast:
            response = self.send_json('post', self.url, {'name': 'P', 'dueDate': '2030-01-01'}, user=self.user)

        self.assertEqual(response.status_code, 201)
        event, project = broadcast.call_args[0]
        self.assertEqual(event, 'project_created')
        self.assertEqual(str(project.pk), response.json()['data']['project']['_id'])


class ProjectListTestCase(ApiClientMixin, TestCase):
    """ Listing, filters and pagination. """

    url = '/api/projects'

    def setUp(self) -> None:
        self.user = make_user()
        self.other = make_user(email='other@example.com', name='Other')

    def test_only_own_projects(self):
        make_project(self.user, name='Mine')
        make_project(self.other, name='Theirs')

        response = self.get_json(self.url, user=self.user)

        self.assertEqual(response.status_code, 200)
        body = response.json()
        self.assertEqual([p['name'] for p in body['data']['projects']], ['Mine'])
        self.assertEqual(body['total'], 1)

    def test_newest_first(self):
        first = make_project(self.user, name='First')
        second = make_project(self.user, name='Second')
        Project.objects.filter(pk=first.pk).update(created_at=second.created_at.replace(year=2000))

        response = self.get_json(self.url, user=self.user)

        self.assertEqual([p['name'] for p in response.json()['data']['projects']], ['Second', 'First'])

    def test_status_filter(self):
        make_project(self.user, name='Planned')
        make_project(self.user, name='Done', status=Project.STATUS_COMPLETED)

        response = self.get_json(self.url, user=self.user, params={'status': 'Completed'})

        self.assertEqual([p['name'] for p in response.json()['data']['projects']], ['Done'])

    def test_unknown_status_filter(self):
        response = self.get_json(self.url, user=self.user, params={'status': 'Archived'})

        self.assertEqual(response.status_code, 400)

    def test_assignee_filter_matches_any(self):
        make_project(self.user, name='A', assignees=['a@example.com', 'b@example.com'])
        make_project(self.user, name='B', assignees=['b@example.com'])
        make_project(self.user, name='C', assignees=['c@example.com'])

        response = self.get_json(self.url, user=self.user, params={'assignee': ['a@example.com', 'b@example.com']})

        body = response.json()
        self.assertEqual(sorted(p['name'] for p in body['data']['projects']), ['A', 'B'])
        self.assertEqual(body['total'], 2)

    def test_date_window_is_inclusive(self):
        make_project(self.user, name='Early', due_date=date(2030, 1, 1))
        make_project(self.user, name='Middle', due_date=date(2030, 2, 1))
        make_project(self.user, name='Late', due_date=date(2030, 3, 1))

        response = self.get_json(self.url, user=self.user, params={'fromDate': '2030-02-01', 'toDate': '2030-03-01'})

        self.assertEqual(sorted(p['name'] for p in response.json()['data']['projects']), ['Late', 'Middle'])

    def test_filters_are_conjunctive(self):
        make_project(self.user, name='Match', status=Project.STATUS_IN_PROGRESS, assignees=['a@example.com'])
        make_project(self.user, name='Wrong status', assignees=['a@example.com'])
        make_project(self.user, name='Wrong assignee', status=Project.STATUS_IN_PROGRESS)

        response = self.get_json(self.url, user=self.user, params={'status': 'In Progress', 'assignee': 'a@example.com'})

        self.assertEqual([p['name'] for p in response.json()['data']['projects']], ['Match'])

    def test_invalid_date_filter(self):
        response = self.get_json(self.url, user=self.user, params={'fromDate': 'yesterday'})

        self.assertEqual(response.status_code, 400)

    def test_pagination_metadata(self):
        for i in range(25):
            make_project(self.user, name=f'P{i}')

        response = self.get_json(self.url, user=self.user, params={'page': 3, 'limit': 10})

        body = response.json()
        self.assertEqual(body['count'], 5)
        self.assertEqual(body['total'], 25)
        self.assertEqual(body['page'], 3)
        self.assertEqual(body['limit'], 10)
        self.assertEqual(body['totalPages'], 3)
        self.assertEqual(len(body['data']['projects']), 5)

    def test_pagination_bounds_are_clamped(self):
        for i in range(3):
            make_project(self.user, name=f'P{i}')

        body = self.get_json(self.url, user=self.user, params={'page': 0, 'limit': 0}).json()
        self.assertEqual((body['page'], body['limit'], body['count'], body['totalPages']), (1, 1, 1, 3))

        body = self.get_json(self.url, user=self.user, params={'limit': 50000}).json()
        self.assertEqual(body['limit'], 1000)

        body = self.get_json(self.url, user=self.user, params={'page': 'abc', 'limit': 'xyz'}).json()
        self.assertEqual((body['page'], body['limit']), (1, 10))

    def test_huge_page_and_limit_values(self):
        make_project(self.user)

        response = self.get_json(self.url, user=self.user, params={
            'page': '99999999999999999999', 'limit': '99999999999999999999',
        })

        self.assertEqual(response.status_code, 200)
        body = response.json()
        self.assertEqual(body['limit'], 1000)
        self.assertEqual(body['page'], (2 ** 63 - 1) // 1000)
        self.assertEqual(body['count'], 0)
        self.assertEqual(body['total'], 1)

    def test_page_past_the_end(self):
        make_project(self.user)

        body = self.get_json(self.url, user=self.user, params={'page': 5}).json()

        self.assertEqual(body['count'], 0)
        self.assertEqual(body['total'], 1)
        self.assertEqual(body['data']['projects'], [])

    def test_empty_list(self):
        body = self.get_json(self.url, user=self.user).json()

        self.assertEqual(body['total'], 0)
        self.assertEqual(body['totalPages'], 0)

    def test_requires_token(self):
        self.assertEqual(self.client.get(self.url).status_code, 401)

    def test_method_not_allowed(self):
        response = self.send_json('delete', self.url, user=self.user)

        self.assertEqual(response.status_code, 405)


class ProjectDetailTestCase(ApiClientMixin, TestCase):
    """ Read, update and delete of a single project. """

    def setUp(self) -> None:
        self.user = make_user()
        self.other = make_user(email='other@example.com', name='Other')
        self.project = make_project(
            self.user,
            name='Original',
            description='Keep me',
            priority=Project.PRIORITY_LOW,
            assignees=['a@example.com'],
        )
        self.url = f'/api/projects/{self.project.pk}'

    def test_get(self):
        response = self.get_json(self.url, user=self.user)

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()['data']['project']['_id'], str(self.project.pk))

    def test_foreign_project_is_not_found(self):
        responses = [
            self.get_json(self.url, user=self.other),
            self.send_json('put', self.url, {'name': 'Hijack'}, user=self.other),
            self.send_json('delete', self.url, user=self.other),
        ]

        for response in responses:
            self.assertEqual(response.status_code, 404)
            self.assertEqual(response.json()['message'], 'Project not found')

        self.project.refresh_from_db()
        self.assertEqual(self.project.name, 'Original')

    def test_unknown_and_malformed_ids(self):
        for project_id in (uuid.uuid4(), 'not-a-uuid'):
            response = self.get_json(f'/api/projects/{project_id}', user=self.user)
            self.assertEqual(response.status_code, 404)

    def test_partial_update(self):
        response = self.send_json('put', self.url, {'status': 'Completed'}, user=self.user)

        self.assertEqual(response.status_code, 200)
        project = response.json()['data']['project']
        self.assertEqual(project['status'], 'Completed')
        self.assertEqual(project['name'], 'Original')
        self.assertEqual(project['description'], 'Keep me')
        self.assertEqual(project['priority'], 'Low')
        self.assertEqual(project['assignees'], ['a@example.com'])

    def test_empty_name_keeps_current_value(self):
        response = self.send_json('put', self.url, {'name': '', 'description': ''}, user=self.user)

        project = response.json()['data']['project']
        self.assertEqual(project['name'], 'Original')
        self.assertEqual(project['description'], '')

    def test_replace_assignees(self):
        response = self.send_json('put', self.url, {'assignees': ['x@example.com', 'y@example.com']}, user=self.user)

        self.assertEqual(response.json()['data']['project']['assignees'], ['x@example.com', 'y@example.com'])

        response = self.send_json('put', self.url, {'assignees': []}, user=self.user)

        self.assertEqual(response.json()['data']['project']['assignees'], [])

    def test_null_assignees_keep_current_list(self):
        response = self.send_json('put', self.url, {'assignees': None, 'status': 'Completed'}, user=self.user)

        project = response.json()['data']['project']
        self.assertEqual(project['status'], 'Completed')
        self.assertEqual(project['assignees'], ['a@example.com'])

    def test_non_string_description(self):
        response = self.send_json('put', self.url, {'description': {'text': 'x'}}, user=self.user)

        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()['message'], 'Description must be a string')
        self.project.refresh_from_db()
        self.assertEqual(self.project.description, 'Keep me')

    def test_update_validation(self):
        response = self.send_json('put', self.url, {'priority': 'Urgent'}, user=self.user)

        self.assertEqual(response.status_code, 400)
        self.project.refresh_from_db()
        self.assertEqual(self.project.priority, Project.PRIORITY_LOW)

    def test_update_invalid_json(self):
        response = self.send_json('put', self.url, 'not json', user=self.user)

        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()['message'], 'Invalid JSON body')

    def test_delete(self):
        with self.captureOnCommitCallbacks(execute=False):
            response = self.send_json('delete', self.url, user=self.user)

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json(), {'success': True, 'message': 'Project deleted successfully'})
        self.assertFalse(Project.objects.filter(pk=self.project.pk).exists())

    def test_without_token(self):
        self.assertEqual(self.client.get(self.url).status_code, 401)
        self.assertEqual(self.send_json('put', self.url, {'name': 'x'}).status_code, 401)
        self.assertEqual(self.send_json('delete', self.url).status_code, 401)
