"""
Integration tests for task API endpoints.
"""
import json
import uuid
from datetime import timedelta

from django.test import TestCase, Client, override_settings
from django.utils import timezone

from apps.identity.jwt_auth import create_access_token
from apps.identity.services import UserService
from apps.tasks.models import Task

FAST_HASHERS = ['django.contrib.auth.hashers.MD5PasswordHasher']


@override_settings(PASSWORD_HASHERS=FAST_HASHERS)
class TaskAPITest(TestCase):

    def setUp(self):
        self.client = Client()
        self.u1 = UserService().create('u1', 'a@x.com', 'pw')
        self.token = create_access_token(self.u1)

    def post_task(self, **overrides):
        payload = {
            'title': 'T',
            'description': 'Something to do',
            'assignee_id': str(self.u1.id),
            'due_date': '2099-01-01T00:00:00Z',
        }
        payload.update(overrides)
        return self.client.post('/api/tasks', data=json.dumps(payload), content_type='application/json')

    def make_task(self, title, due, description=''):
        return Task.objects.create(
            title=title, description=description, assignee_id=self.u1.id, due_date=due,
        )

    def test_create_task_returns_assignee(self):
        response = self.post_task()
        self.assertEqual(response.status_code, 201)
        data = response.json()
        self.assertEqual(data['title'], 'T')
        self.assertEqual(data['assignee_id'], str(self.u1.id))
        self.assertEqual(data['assignee']['username'], 'u1')
        self.assertTrue(Task.objects.filter(id=data['id']).exists())

    def test_create_task_unknown_assignee(self):
        response = self.post_task(assignee_id=str(uuid.uuid4()))
        self.assertEqual(response.status_code, 404)
        self.assertFalse(Task.objects.exists())

    def test_create_task_malformed_body(self):
        response = self.post_task(due_date='not-a-date')
        self.assertEqual(response.status_code, 400)
        self.assertFalse(Task.objects.exists())

    def test_create_task_title_too_long(self):
        response = self.post_task(title='x' * 201)
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()['code'], 'VALIDATION_ERROR')
        self.assertFalse(Task.objects.exists())

    def test_list_tasks_requires_token(self):
        self.post_task()
        self.assertEqual(self.client.get('/api/tasks').status_code, 401)

        response = self.client.get('/api/tasks', HTTP_AUTHORIZATION=f'Bearer {self.token}')
        self.assertEqual(response.status_code, 200)
        self.assertEqual(len(response.json()), 1)

    def test_get_task(self):
        task_id = self.post_task().json()['id']
        response = self.client.get(f'/api/tasks/{task_id}')
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()['id'], task_id)

        self.assertEqual(self.client.get(f'/api/tasks/{uuid.uuid4()}').status_code, 404)

    def test_update_task(self):
        task_id = self.post_task().json()['id']
        payload = {
            'title': 'Renamed',
            'description': '',
            'assignee_id': str(self.u1.id),
            'due_date': '2099-02-01T10:00:00Z',
        }
        response = self.client.put(
            f'/api/tasks/{task_id}', data=json.dumps(payload), content_type='application/json',
        )
        self.assertEqual(response.status_code, 204)
        task = Task.objects.get(id=task_id)
        self.assertEqual(task.title, 'Renamed')
        self.assertEqual(task.description, '')

    def test_update_missing_task(self):
        payload = {
            'title': 'X', 'assignee_id': str(self.u1.id), 'due_date': '2099-02-01T10:00:00Z',
        }
        response = self.client.put(
            f'/api/tasks/{uuid.uuid4()}', data=json.dumps(payload), content_type='application/json',
        )
        self.assertEqual(response.status_code, 404)

    def test_delete_task(self):
        task_id = self.post_task().json()['id']
        self.assertEqual(self.client.delete(f'/api/tasks/{task_id}').status_code, 204)
        self.assertEqual(self.client.delete(f'/api/tasks/{task_id}').status_code, 404)

    def test_expired_and_active(self):
        now = timezone.now()
        past = self.make_task('Past', now - timedelta(days=1))
        future = self.make_task('Future', now + timedelta(days=1))

        expired = self.client.get('/api/tasks/expired').json()
        active = self.client.get('/api/tasks/active').json()
        self.assertEqual([t['id'] for t in expired], [str(past.id)])
        self.assertEqual([t['id'] for t in active], [str(future.id)])

    def test_by_user(self):
        self.post_task()
        response = self.client.get(f'/api/tasks/byuser/{self.u1.id}')
        self.assertEqual(len(response.json()), 1)
        self.assertEqual(self.client.get(f'/api/tasks/byuser/{uuid.uuid4()}').json(), [])

    def test_by_date(self):
        self.post_task(due_date='2099-01-01T18:45:00Z')
        self.post_task(title='Other day', due_date='2099-01-02T00:00:00Z')
        response = self.client.get('/api/tasks/bydate/2099-01-01')
        self.assertEqual(response.status_code, 200)
        self.assertEqual([t['title'] for t in response.json()], ['T'])

    def test_search_with_keyword_and_sort(self):
        self.post_task(title='Alpha foo', due_date='2099-01-03T00:00:00Z')
        self.post_task(title='Bravo', description='contains foo', due_date='2099-01-02T00:00:00Z')
        self.post_task(title='Charlie', description='nothing', due_date='2099-01-01T00:00:00Z')

        response = self.client.get('/api/tasks/search', {'keyword': 'foo'})
        self.assertEqual([t['title'] for t in response.json()], ['Bravo', 'Alpha foo'])

        response = self.client.get('/api/tasks/search', {'sortBy': 'title', 'order': 'desc'})
        self.assertEqual([t['title'] for t in response.json()], ['Charlie', 'Bravo', 'Alpha foo'])

        response = self.client.get('/api/tasks/search', {'sortBy': 'unknown', 'order': 'desc'})
        self.assertEqual([t['title'] for t in response.json()], ['Charlie', 'Bravo', 'Alpha foo'])
