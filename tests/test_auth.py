"""
Tests for the admin API token gate
"""
import json


class TestAdminAuth:
    """Tests for admin_required"""

    def test_open_without_token(self, client, app):
        response = client.get('/api/admin')
        assert response.status_code == 200
        assert json.loads(response.data)['data']['auth_enabled'] is False

    def test_missing_token(self, client, admin_token):
        response = client.get('/api/admin/consoles')
        data = json.loads(response.data)

        assert response.status_code == 401
        assert data['code'] == 'UNAUTHORIZED'

    def test_wrong_token(self, client, admin_token):
        response = client.post('/api/admin/consoles', json={'name': 'Saturn'},
                               headers={'Authorization': 'Bearer nope'})
        assert response.status_code == 401
        assert json.loads(response.data)['message'] == 'Invalid API token'

    def test_wrong_scheme(self, client, admin_token):
        response = client.get('/api/admin', headers={'Authorization': f'Basic {admin_token}'})
        assert response.status_code == 401

    def test_valid_token(self, client, admin_token):
        headers = {'Authorization': f'Bearer {admin_token}'}

        response = client.post('/api/admin/consoles', json={'name': 'Saturn'}, headers=headers)
        assert response.status_code == 201

        index = json.loads(client.get('/api/admin', headers=headers).data)
        assert index['data']['auth_enabled'] is True

    def test_public_routes_stay_open(self, client, admin_token):
        assert client.get('/api/consoles').status_code == 200

    def test_settings_hide_token(self, client, admin_token):
        headers = {'Authorization': f'Bearer {admin_token}'}
        data = json.loads(client.get('/api/admin/settings', headers=headers).data)['data']

        assert data['admin'] == {'api_token_set': True}
        assert 'site' in data
