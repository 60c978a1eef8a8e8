"""End-to-end tests for the demo push endpoints."""

import pytest
from fastapi.testclient import TestClient

from pubsub_interceptor.api.main import app, describe_validation_error

from conftest import encode


@pytest.fixture
def client():
    with TestClient(app) as test_client:
        yield test_client


class TestDemoRoot:
    def test_handles_b64_encoded_messages(self, client, push_envelope):
        response = client.post('/', json=push_envelope)

        assert response.status_code == 201

    def test_returns_the_decoded_string(self, client, push_envelope):
        response = client.post('/', json=push_envelope)

        assert response.status_code == 201
        assert response.text == 'mystring'

    def test_non_b64_data_returns_400(self, client, push_envelope):
        push_envelope['message']['data'] = 'Some non-base64 string'

        response = client.post('/', json=push_envelope)

        assert response.status_code == 400
        assert response.json() == {
            'error': 'Bad Request',
            'message': [
                '{"target":{"data":"Some non-base64 string","messageId":"1","attributes":{"foo":"bar"}},'
                '"value":"Some non-base64 string","property":"data","children":[],'
                '"constraints":{"isBase64":"data must be base64 encoded"}}',
            ],
            'statusCode': 400,
        }

    def test_missing_data_returns_400(self, client, push_envelope):
        del push_envelope['message']['data']

        response = client.post('/', json=push_envelope)

        assert response.status_code == 400
        assert response.json()['message'] == [
            '{"target":{"messageId":"1","attributes":{"foo":"bar"}},'
            '"property":"data","children":[],'
            '"constraints":{"isBase64":"data must be base64 encoded"}}',
        ]

    def test_bad_some_dto_returns_400(self, client, push_envelope):
        push_envelope['message']['data'] = encode('{"foo":"bar"}')

        response = client.post('/', json=push_envelope)

        assert response.status_code == 400
        assert response.json() == {
            'error': 'Bad Request',
            'statusCode': 400,
            'message': [
                'someString: Field required',
                'someNumber: Field required',
            ],
        }

    def test_wrong_field_types_are_listed_per_field(self, client, push_envelope):
        push_envelope['message']['data'] = encode('{"someString":1,"someNumber":"x"}')

        response = client.post('/', json=push_envelope)

        assert response.status_code == 400
        messages = response.json()['message']
        assert any(m.startswith('someString: ') for m in messages)
        assert any(m.startswith('someNumber') for m in messages)


class TestDescribeValidationError:
    def test_drops_body_location(self):
        error = {'loc': ('body', 'someString'), 'msg': 'Field required'}

        assert describe_validation_error(error) == 'someString: Field required'

    def test_whole_body_error_is_message_only(self):
        error = {'loc': ('body',), 'msg': 'Input should be a valid dictionary'}

        assert describe_validation_error(error) == 'Input should be a valid dictionary'


class TestDemoRootEnvelopeErrors:
    def test_empty_payload_returns_400(self, client):
        response = client.post('/', content=b'')

        assert response.status_code == 400
        assert response.json() == {
            'error': 'Bad Request',
            'message': ['Missing message field in request body'],
            'statusCode': 400,
        }

    def test_empty_object_returns_400(self, client):
        response = client.post('/', json={})

        assert response.status_code == 400
        assert response.json()['message'] == ['Missing message field in request body']

    def test_string_message_returns_400(self, client, push_envelope):
        push_envelope['message'] = 'a string'

        response = client.post('/', json=push_envelope)

        assert response.status_code == 400
        assert response.json()['message'] == [
            'The message field has value: "a string". This is not a valid object',
        ]


class TestDemoHeaders:
    def test_empty_attributes(self, client, push_envelope):
        push_envelope['message']['attributes'] = {}

        response = client.post('/headers', json=push_envelope)

        assert response.status_code == 201
        assert not any(name.startswith('x-pubsub-') for name in response.json())

    def test_null_attributes(self, client, push_envelope):
        push_envelope['message']['attributes'] = None

        response = client.post('/headers', json=push_envelope)

        assert response.status_code == 201

    def test_missing_attributes(self, client, push_envelope):
        del push_envelope['message']['attributes']

        response = client.post('/headers', json=push_envelope)

        assert response.status_code == 201

    def test_adds_header_based_on_attributes(self, client, push_envelope):
        response = client.post('/headers', json=push_envelope)

        assert response.status_code == 201
        assert response.json()['x-pubsub-foo'] == 'bar'


class TestHealth:
    def test_health(self, client):
        response = client.get('/health')

        assert response.status_code == 200
        assert response.json() == {'status': 'ok'}
