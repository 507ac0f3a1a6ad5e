# apps/board/tests.py

from datetime import date
from unittest import mock

from asgiref.sync import async_to_sync
from channels.layers import get_channel_layer
from channels.testing import WebsocketCommunicator
from django.contrib.auth.models import AnonymousUser
from django.test import TestCase

from apps.core.auth_service import auth_service
from apps.core.models import Project
from apps.core.tests.helpers import ApiClientMixin, make_project, make_user

from .consumers import ProjectConsumer
from .events import broadcast_project_event, project_group_name
from .middleware import TokenAuthMiddlewareStack, get_user_for_token


class BoardViewTestCase(ApiClientMixin, TestCase):
    """ Kanban data endpoint. """

    url = '/api/projects/board'

    def setUp(self) -> None:
        self.user = make_user()

    def test_columns_in_fixed_order_even_when_empty(self):
        response = self.get_json(self.url, user=self.user)

        self.assertEqual(response.status_code, 200)
        data = response.json()['data']
        self.assertEqual([c['status'] for c in data['columns']], ['Planning', 'In Progress', 'Completed'])
        self.assertEqual([c['count'] for c in data['columns']], [0, 0, 0])
        self.assertEqual(data['total'], 0)

    def test_groups_projects_by_status(self):
        make_project(self.user, name='Idea')
        make_project(self.user, name='Doing', status=Project.STATUS_IN_PROGRESS)
        make_project(self.user, name='Done', status=Project.STATUS_COMPLETED)
        make_project(self.user, name='Done too', status=Project.STATUS_COMPLETED)
        make_project(make_user(email='other@example.com', name='Other'), name='Foreign')

        data = self.get_json(self.url, user=self.user).json()['data']

        columns = {c['status']: c for c in data['columns']}
        self.assertEqual(data['total'], 4)
        self.assertEqual(columns['Planning']['count'], 1)
        self.assertEqual(columns['In Progress']['projects'][0]['name'], 'Doing')
        self.assertEqual(sorted(p['name'] for p in columns['Completed']['projects']), ['Done', 'Done too'])

    def test_list_filters_apply(self):
        make_project(self.user, name='Mine', assignees=['me@example.com'], due_date=date(2030, 5, 1))
        make_project(self.user, name='Later', assignees=['me@example.com'], due_date=date(2031, 5, 1))
        make_project(self.user, name='Someone else', due_date=date(2030, 5, 1))

        data = self.get_json(self.url, user=self.user, params={
            'assignee': 'me@example.com', 'toDate': '2030-12-31',
        }).json()['data']

        self.assertEqual(data['total'], 1)
        self.assertEqual(data['columns'][0]['projects'][0]['name'], 'Mine')

    def test_not_taken_for_project_id(self):
        self.assertEqual(self.client.get(self.url).status_code, 401)


class BroadcastTestCase(TestCase):
    """ Project events sent to the owner's channel group. """

    def setUp(self) -> None:
        self.user = make_user()
        self.project = make_project(self.user, name='Live')

    def test_sent_only_after_commit(self):
        channel_layer = mock.Mock()
        channel_layer.group_send = mock.AsyncMock()

        with mock.patch('apps.board.events.get_channel_layer', return_value=channel_layer):
            with self.captureOnCommitCallbacks(execute=False) as callbacks:
                broadcast_project_event('project_updated', self.project)

            channel_layer.group_send.assert_not_called()

            for callback in callbacks:
                callback()

        group, message = channel_layer.group_send.call_args[0]
        self.assertEqual(group, f'projects_{self.user.pk}')
        self.assertEqual(message['type'], 'project_updated')
        self.assertEqual(message['message']['projectId'], str(self.project.pk))
        self.assertEqual(message['message']['project']['name'], 'Live')

    def test_deleted_event_carries_id_only(self):
        channel_layer = mock.Mock()
        channel_layer.group_send = mock.AsyncMock()

        with mock.patch('apps.board.events.get_channel_layer', return_value=channel_layer):
            with self.captureOnCommitCallbacks(execute=True):
                broadcast_project_event('project_deleted', project_id=self.project.pk, owner_id=self.user.pk)

        group, message = channel_layer.group_send.call_args[0]
        self.assertEqual(group, project_group_name(self.user.pk))
        self.assertNotIn('project', message['message'])

    def test_unknown_event(self):
        with self.assertRaises(ValueError):
            broadcast_project_event('project_archived', self.project)

    def test_view_delete_broadcasts(self):
        headers = {'HTTP_AUTHORIZATION': f'Bearer {auth_service.issue_token(self.user)}'}

        with mock.patch('apps.board.events.send_project_event') as send:
            with self.captureOnCommitCallbacks(execute=True):
                self.client.delete(f'/api/projects/{self.project.pk}', **headers)

        event, message, owner_id = send.call_args[0]
        self.assertEqual(event, 'project_deleted')
        self.assertEqual(owner_id, self.user.pk)


class TokenMiddlewareTestCase(TestCase):
    """ WebSocket token lookup. """

    def test_valid_token(self):
        user = make_user()

        resolved = async_to_sync(get_user_for_token)(auth_service.issue_token(user))

        self.assertEqual(resolved.pk, user.pk)

    def test_invalid_token(self):
        resolved = async_to_sync(get_user_for_token)('garbage')

        self.assertIsInstance(resolved, AnonymousUser)


class ProjectConsumerTestCase(TestCase):
    """ WebSocket consumer. """

    def setUp(self) -> None:
        self.user = make_user()

    def communicator(self, user):
        consumer = ProjectConsumer.as_asgi()

        async def application(scope, receive, send):
            return await consumer(dict(scope, user=user), receive, send)

        return WebsocketCommunicator(application, '/ws/projects/')

    async def test_rejects_anonymous(self):
        communicator = self.communicator(AnonymousUser())

        connected, _ = await communicator.connect()

        self.assertFalse(connected)

    async def test_rejects_missing_token_through_stack(self):
        application = TokenAuthMiddlewareStack(ProjectConsumer.as_asgi())
        communicator = WebsocketCommunicator(application, '/ws/projects/')

        connected, _ = await communicator.connect()

        self.assertFalse(connected)

    async def test_ping_pong(self):
        communicator = self.communicator(self.user)
        connected, _ = await communicator.connect()
        self.assertTrue(connected)

        greeting = await communicator.receive_json_from()
        self.assertEqual(greeting['type'], 'connected')

        await communicator.send_json_to({'type': 'ping'})
        reply = await communicator.receive_json_from()
        self.assertEqual(reply['type'], 'pong')

        await communicator.send_to(text_data='{oops')
        reply = await communicator.receive_json_from()
        self.assertEqual(reply, {'type': 'error', 'message': 'Invalid JSON'})

        await communicator.disconnect()

    async def test_receives_group_events(self):
        communicator = self.communicator(self.user)
        await communicator.connect()
        await communicator.receive_json_from()

        await get_channel_layer().group_send(
            project_group_name(self.user.pk),
            {'type': 'project_created', 'message': {'event': 'project_created', 'projectId': 'abc'}},
        )

        event = await communicator.receive_json_from()
        self.assertEqual(event['type'], 'project_created')
        self.assertEqual(event['message']['projectId'], 'abc')

        await communicator.disconnect()
