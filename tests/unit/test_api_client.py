"""Tests for the async API client."""
import json
import time
import pytest

import aiohttp

from drivepy.core.api import AsyncAPIClient, APIConfig, SessionCredentials
from drivepy.core.api.errors import DriveAPIError, APIErrorCodes
from drivepy.core.exceptions import DriveAuthError


class FakeResponse:
    """Minimal stand-in for aiohttp.ClientResponse."""

    def __init__(self, status=200, payload=None, reason='OK'):
        self.status = status
        self.reason = reason
        self._payload = payload
        self.headers = {'Content-Type': 'application/json'}

    async def json(self, content_type=None):
        return self._payload

    async def text(self):
        return '' if self._payload is None else json.dumps(self._payload)

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        return False


class FakeSession:
    """Records requests and replays queued responses."""

    def __init__(self, *responses):
        self.responses = list(responses)
        self.calls = []
        self.closed = False

    def request(self, method, url, data=None, headers=None, proxy=None):
        self.calls.append({'method': method, 'url': url, 'data': data, 'headers': headers})
        response = self.responses.pop(0)
        if isinstance(response, Exception):
            raise response
        return response


def make_client(config, *responses):
    session = FakeSession(*responses)
    return AsyncAPIClient(config, session=session), session


class TestRequests:
    """Test suite for request dispatch."""

    @pytest.mark.asyncio
    async def test_envelope_unwrapped(self, api_config):
        """Test the data envelope is removed."""
        client, _ = make_client(api_config, FakeResponse(payload={
            'data': {'id': 'item-1'},
            'paging': {'total': 1},
        }))

        assert await client.get('/drive/d/item/item-1') == {'id': 'item-1'}

    @pytest.mark.asyncio
    async def test_bare_payload(self, api_config):
        """Test bare payloads are returned as-is."""
        client, _ = make_client(api_config, FakeResponse(payload=[{'id': 'a'}]))

        assert await client.get('/drive/d/item/path/docs') == [{'id': 'a'}]

    @pytest.mark.asyncio
    async def test_url_and_headers(self, api_config):
        """Test URL building and bearer header."""
        client, session = make_client(api_config, FakeResponse(payload={}))

        await client.get('/drive/d/item/path/a', {'case_sensitive': False, 'skip': None})

        call = session.calls[0]
        assert call['method'] == 'GET'
        assert call['url'] == 'https://api.example.com/v1/drive/d/item/path/a?case_sensitive=false'
        assert call['headers']['Authorization'] == 'Bearer test-api-key-123456'
        assert call['data'] is None

    @pytest.mark.asyncio
    async def test_json_body(self, api_config):
        """Test mapping bodies are sent as JSON."""
        client, session = make_client(api_config, FakeResponse(payload={'ok': True}))

        await client.post('/drive/d/item/f/failed', {'error': 'Upload failed'})

        call = session.calls[0]
        assert json.loads(call['data']) == {'error': 'Upload failed'}
        assert call['headers']['Content-Type'] == 'application/json'

    @pytest.mark.asyncio
    async def test_form_body(self, api_config):
        """Test form bodies are passed through without a JSON content type."""
        client, session = make_client(api_config, FakeResponse(payload={'ok': True}))
        form = aiohttp.FormData()
        form.add_field('files', b'abc', filename='a.txt')

        await client.post('/drive/d/item', form)

        call = session.calls[0]
        assert call['data'] is form
        assert 'Content-Type' not in call['headers']

    @pytest.mark.asyncio
    async def test_no_content(self, api_config):
        """Test 204 responses yield None."""
        client, _ = make_client(api_config, FakeResponse(status=204))

        assert await client.delete('/drive/d/item/x') is None


class TestErrors:
    """Test suite for error translation."""

    @pytest.mark.asyncio
    async def test_not_found(self, api_config):
        """Test non-2xx responses raise with status and message."""
        client, _ = make_client(api_config, FakeResponse(
            status=404, reason='Not Found', payload={'message': 'Item not found'}
        ))

        with pytest.raises(DriveAPIError) as exc_info:
            await client.get('/drive/d/item/path/missing')

        error = exc_info.value
        assert error.status == 404
        assert error.is_not_found
        assert error.code == 'NOT_FOUND'
        assert error.message == 'Item not found'
        assert str(error) == 'Item not found (HTTP 404)'

    @pytest.mark.asyncio
    async def test_reason_fallback(self, api_config):
        """Test the reason phrase is used without a message."""
        client, _ = make_client(api_config, FakeResponse(status=502, reason='Bad Gateway', payload=None))

        with pytest.raises(DriveAPIError, match='Bad Gateway'):
            await client.get('/x')

    @pytest.mark.asyncio
    async def test_embedded_error(self, api_config):
        """Test 2xx bodies carrying an error raise."""
        client, _ = make_client(api_config, FakeResponse(payload={
            'error': {'message': 'Quota exceeded', 'code': 'QUOTA'}
        }))

        with pytest.raises(DriveAPIError, match='Quota exceeded') as exc_info:
            await client.post('/drive/d/item', {'path': '/'})

        assert exc_info.value.status == 200

    @pytest.mark.asyncio
    async def test_network_error(self, api_config):
        """Test network failures become NETWORK_ERROR without status."""
        cause = aiohttp.ClientConnectionError('connection reset')
        client, _ = make_client(api_config, cause)

        with pytest.raises(DriveAPIError) as exc_info:
            await client.get('/x')

        assert exc_info.value.status is None
        assert exc_info.value.code == APIErrorCodes.NETWORK_ERROR
        assert exc_info.value.__cause__ is cause

    @pytest.mark.asyncio
    async def test_no_retry(self, api_config):
        """Test a failed request is sent once."""
        client, session = make_client(
            api_config,
            FakeResponse(status=503, reason='Service Unavailable', payload=None),
            FakeResponse(payload={'ok': True}),
        )

        with pytest.raises(DriveAPIError):
            await client.get('/x')

        assert len(session.calls) == 1

    @pytest.mark.asyncio
    async def test_closed_client(self, api_config):
        """Test requests after close raise."""
        client, _ = make_client(api_config)
        await client.close()

        with pytest.raises(DriveAPIError, match='closed'):
            await client.get('/x')


class TestCredentialRefresh:
    """Test suite for lazy token refresh."""

    @pytest.mark.asyncio
    async def test_expired_session_refreshed(self):
        """Test an expired session is refreshed before dispatch."""
        config = APIConfig(
            api_url='https://api.example.com',
            session=SessionCredentials('old-token', refresh_token='refresh-1', exp=1),
        )
        client, session = make_client(
            config,
            FakeResponse(payload={'data': {
                'access_token': 'new-token',
                'refresh_token': 'refresh-2',
                'exp': int(time.time()) + 3600,
            }}),
            FakeResponse(payload={'id': 'job-1'}),
        )

        await client.get('/drive/d/item/upload/job-1')

        signin, request = session.calls
        assert signin['url'] == 'https://api.example.com/v1/auth/signin'
        assert json.loads(signin['data']) == {'grant_type': 'refresh', 'refresh_token': 'refresh-1'}
        assert request['headers']['Authorization'] == 'Bearer new-token'
        assert config.session.refresh_token == 'refresh-2'

    @pytest.mark.asyncio
    async def test_valid_session_not_refreshed(self):
        """Test a fresh session is used as-is."""
        config = APIConfig(session=SessionCredentials('token', exp=int(time.time()) + 3600))
        client, session = make_client(config, FakeResponse(payload={}))

        await client.get('/x')

        assert len(session.calls) == 1
        assert session.calls[0]['headers']['Authorization'] == 'Bearer token'

    @pytest.mark.asyncio
    async def test_refresh_without_token(self):
        """Test an expired session without refresh token raises."""
        config = APIConfig(session=SessionCredentials('old-token', exp=1))
        client, session = make_client(config)

        with pytest.raises(DriveAuthError):
            await client.get('/x')

        assert session.calls == []
