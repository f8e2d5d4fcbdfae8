"""Skill routes."""
import pytest


@pytest.fixture
def owner(make_user, login):
    user_id = make_user('u@example.com')
    login('u@example.com')
    return user_id


def create(client, user_id, **fields):
    payload = {'userId': user_id, 'name': 'Go', 'level': 'Beginner'}
    payload.update(fields)
    return client.post('/api/skills', json=payload)


class TestCreateSkill:

    def test_create(self, client, owner):
        response = create(client, owner, certificationUrl='https://certs.example.com/go')

        assert response.status_code == 201
        skill = response.get_json()
        assert skill['userId'] == owner
        assert skill['level'] == 'Beginner'
        assert skill['certificationUrl'] == 'https://certs.example.com/go'
        assert skill['updatedAt']

        history = client.get(f'/api/skills/{skill["id"]}/history').get_json()
        assert len(history) == 1
        assert (history[0]['name'], history[0]['level'], history[0]['certificationUrl']) == \
            ('Go', 'Beginner', 'https://certs.example.com/go')

    def test_create_with_long_certification_url(self, client, owner):
        url = 'https://certs.example.com/' + 'a' * 274
        response = create(client, owner, certificationUrl=url)
        assert response.status_code == 201
        assert response.get_json()['certificationUrl'] == url

    def test_create_for_other_user_is_forbidden(self, client, owner, make_user):
        other_id = make_user('o@example.com')
        response = create(client, other_id)
        assert response.status_code == 403
        assert client.get('/api/skills').get_json() == []

    @pytest.mark.parametrize('fields', [
        {'level': 'Guru'},
        {'name': ''},
        {'certificationUrl': 'ftp://nope'},
        {'userId': 'one'},
    ])
    def test_validation(self, client, owner, fields):
        response = create(client, owner, **fields)
        assert response.status_code == 400
        assert response.get_json()['kind'] == 'validation'

    def test_list_only_own_skills(self, client, owner, make_user, login):
        create(client, owner, name='Go')
        create(client, owner, name='SQL')
        other_id = make_user('o@example.com')
        client.post('/api/logout')
        login('o@example.com')
        create(client, other_id, name='Rust')

        assert [s['name'] for s in client.get('/api/skills').get_json()] == ['Rust']


class TestUpdateSkill:

    def test_scenario_level_and_certification(self, client, owner):
        skill_id = create(client, owner).get_json()['id']

        response = client.put(f'/api/skills/{skill_id}', json={
            'userId': owner, 'name': 'Go', 'level': 'Expert', 'certificationUrl': 'https://x/y',
        })

        assert response.status_code == 200
        assert (response.get_json()['level'], response.get_json()['certificationUrl']) == ('Expert', 'https://x/y')
        history = client.get(f'/api/skills/{skill_id}/history').get_json()
        assert len(history) == 2
        assert (history[0]['name'], history[0]['level'], history[0]['certificationUrl']) == \
            ('Go', 'Expert', 'https://x/y')

    def test_name_only_update(self, client, owner):
        skill_id = create(client, owner).get_json()['id']

        response = client.put(f'/api/skills/{skill_id}', json={'name': 'Golang'})

        assert response.status_code == 200
        assert response.get_json()['name'] == 'Golang'
        assert len(client.get(f'/api/skills/{skill_id}/history').get_json()) == 1

    def test_missing_skill(self, client, owner):
        response = client.put('/api/skills/999', json={'level': 'Expert'})
        assert response.status_code == 404
        assert response.get_json()['kind'] == 'not_found'

    def test_other_users_skill(self, client, owner, make_user, login):
        skill_id = create(client, owner).get_json()['id']
        make_user('o@example.com')
        client.post('/api/logout')
        login('o@example.com')

        assert client.put(f'/api/skills/{skill_id}', json={'level': 'Expert'}).status_code == 403
        assert client.get(f'/api/skills/{skill_id}/history').status_code == 403

    def test_history_of_missing_skill(self, client, owner):
        assert client.get('/api/skills/999/history').status_code == 404

    def test_invalid_level(self, client, owner):
        skill_id = create(client, owner).get_json()['id']
        response = client.put(f'/api/skills/{skill_id}', json={'level': 'Master'})
        assert response.status_code == 400
