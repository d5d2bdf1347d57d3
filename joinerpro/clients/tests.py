"""
Test suite for the Clients module
Tests: client CRUD, duplicate e-mail conflict, protected deletion
"""
from django.test import TestCase
from rest_framework import status
from joinerpro.core.test_utils import TestDataFactory, AuthenticatedAPIClient
from joinerpro.clients.models import Client


class ClientAPITests(TestCase):
    """Test Client API endpoints"""

    def setUp(self):
        self.user = TestDataFactory.create_user()
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.user)

    def test_create_client(self):
        data = {'name': 'Ana Souza', 'email': 'ana@example.com', 'phone': '11988887777'}
        response = self.client.post('/api/v1/clients/', data, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['name'], 'Ana Souza')
        self.assertEqual(response.data['project_count'], 0)

    def test_duplicate_email_conflict(self):
        """Test the same e-mail twice gives 201 then 409"""
        data = {'name': 'Ana Souza', 'email': 'ana@example.com'}
        first = self.client.post('/api/v1/clients/', data, format='json')
        self.assertEqual(first.status_code, status.HTTP_201_CREATED)

        second = self.client.post(
            '/api/v1/clients/', {'name': 'Other Ana', 'email': 'ANA@example.com'}, format='json'
        )
        self.assertEqual(second.status_code, status.HTTP_409_CONFLICT)
        self.assertIn('message', second.data)
        self.assertEqual(Client.objects.count(), 1)

    def test_create_missing_fields(self):
        response = self.client.post('/api/v1/clients/', {'phone': '123'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('name', response.data['errors'])
        self.assertIn('email', response.data['errors'])

    def test_blank_name_rejected(self):
        response = self.client.post('/api/v1/clients/', {'name': '   ', 'email': 'x@example.com'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_list_ordered_by_name_with_counts(self):
        zeca = TestDataFactory.create_client(name='Zeca')
        TestDataFactory.create_client(name='Ana')
        TestDataFactory.create_project(client=zeca)
        response = self.client.get('/api/v1/clients/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual([c['name'] for c in response.data], ['Ana', 'Zeca'])
        self.assertEqual(response.data[1]['project_count'], 1)

    def test_search(self):
        TestDataFactory.create_client(name='Marcenaria Silva')
        TestDataFactory.create_client(name='Ana')
        response = self.client.get('/api/v1/clients/?search=silva')
        self.assertEqual(len(response.data), 1)

    def test_detail_embeds_projects_newest_first(self):
        client = TestDataFactory.create_client()
        TestDataFactory.create_project(client=client, name='Old')
        TestDataFactory.create_project(client=client, name='New')
        response = self.client.get(f'/api/v1/clients/{client.id}/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual([p['name'] for p in response.data['projects']], ['New', 'Old'])

    def test_patch(self):
        client = TestDataFactory.create_client(name='Old name')
        response = self.client.patch(f'/api/v1/clients/{client.id}/', {'name': 'New name'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        client.refresh_from_db()
        self.assertEqual(client.name, 'New name')

    def test_patch_to_taken_email_conflict(self):
        TestDataFactory.create_client(email='taken@example.com')
        client = TestDataFactory.create_client()
        response = self.client.patch(f'/api/v1/clients/{client.id}/', {'email': 'taken@example.com'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_409_CONFLICT)

    def test_delete(self):
        client = TestDataFactory.create_client()
        response = self.client.delete(f'/api/v1/clients/{client.id}/')
        self.assertEqual(response.status_code, status.HTTP_204_NO_CONTENT)
        self.assertFalse(Client.objects.filter(id=client.id).exists())

    def test_delete_with_projects_conflict(self):
        client = TestDataFactory.create_client()
        TestDataFactory.create_project(client=client)
        response = self.client.delete(f'/api/v1/clients/{client.id}/')
        self.assertEqual(response.status_code, status.HTTP_409_CONFLICT)
        self.assertTrue(Client.objects.filter(id=client.id).exists())

    def test_unknown_client(self):
        response = self.client.get('/api/v1/clients/9999/')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
