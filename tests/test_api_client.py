"""Unit tests for the ApiClient request layer."""

import httpx
import pytest

from mediaclient.exceptions import ApiConnectionError, ApiError, PayloadError


def test_request_returns_parsed_json(make_client):
    """JSON responses are decoded."""
    client = make_client(lambda request: httpx.Response(200, json={'ok': True}))

    assert client.request('/anything') == {'ok': True}


def test_request_returns_text_for_non_json(make_client):
    """Non-JSON responses come back as text."""
    client = make_client(lambda request: httpx.Response(200, text='pong'))

    assert client.request('/ping') == 'pong'


def test_request_sets_json_content_type_by_default(make_client):
    """JSON content type is the default for non-multipart requests."""
    seen = {}

    def handler(request):
        seen['content_type'] = request.headers.get('content-type')
        return httpx.Response(200, json={})

    client = make_client(handler)
    client.request('/users/me', 'PUT', json={'full_name': 'Ana'})

    assert seen['content_type'] == 'application/json'


def test_request_caller_headers_override_default(make_client):
    """Caller-supplied headers win over the default content type."""
    seen = {}

    def handler(request):
        seen['content_type'] = request.headers.get('content-type')
        seen['custom'] = request.headers.get('x-custom')
        return httpx.Response(200, json={})

    client = make_client(handler)
    client.request('/x', 'POST', json={}, headers={'Content-Type': 'application/vnd.test+json', 'X-Custom': '1'})

    assert seen['content_type'] == 'application/vnd.test+json'
    assert seen['custom'] == '1'


def test_request_form_body_is_url_encoded(make_client):
    """Form bodies are sent url-encoded."""
    seen = {}

    def handler(request):
        seen['content_type'] = request.headers.get('content-type')
        seen['body'] = request.content.decode()
        return httpx.Response(200, json={})

    client = make_client(handler)
    client.request('/auth/login', 'POST', data={'username': 'a@b.c', 'password': 'pw'})

    assert seen['content_type'].startswith('application/x-www-form-urlencoded')
    assert 'username=a%40b.c' in seen['body']


def test_request_multipart_leaves_boundary_to_transport(make_client):
    """Multipart bodies keep the transport's boundary content type."""
    seen = {}

    def handler(request):
        seen['content_type'] = request.headers.get('content-type')
        return httpx.Response(200, json={})

    client = make_client(handler)
    client.request('/upload', 'POST', files={'file': ('a.png', b'data', 'image/png')})

    assert seen['content_type'].startswith('multipart/form-data; boundary=')


def test_bearer_header_attached_when_token_stored(make_client, temp_config):
    """The stored token is sent as a bearer credential."""
    seen = {}

    def handler(request):
        seen['auth'] = request.headers.get('authorization')
        return httpx.Response(200, json={})

    client = make_client(handler)
    client.token_store.set_token('tok123')
    client.request('/users/me')

    assert seen['auth'] == 'Bearer tok123'


def test_no_bearer_header_without_token(make_client):
    """No Authorization header is sent when logged out."""
    seen = {}

    def handler(request):
        seen['has_auth'] = 'authorization' in request.headers
        return httpx.Response(200, json={})

    client = make_client(handler)
    client.request('/users/me')

    assert seen['has_auth'] is False


def test_error_uses_json_detail(make_client):
    """The JSON detail field becomes the error message."""
    client = make_client(lambda request: httpx.Response(400, json={'detail': 'Email already registered'}))

    with pytest.raises(ApiError) as exc_info:
        client.request('/auth/register', 'POST', json={})

    assert str(exc_info.value) == 'Email already registered'
    assert exc_info.value.status_code == 400


def test_error_with_structured_detail_is_serialized(make_client):
    """Non-string detail payloads are rendered as JSON text."""
    client = make_client(lambda request: httpx.Response(422, json={'detail': [{'msg': 'field required'}]}))

    with pytest.raises(ApiError) as exc_info:
        client.request('/media/')

    assert 'field required' in str(exc_info.value)


def test_error_falls_back_to_raw_text(make_client):
    """Plain-text error bodies are used verbatim."""
    client = make_client(lambda request: httpx.Response(502, text='Bad gateway upstream'))

    with pytest.raises(ApiError) as exc_info:
        client.request('/media/')

    assert str(exc_info.value) == 'Bad gateway upstream'


def test_error_falls_back_to_status_line(make_client):
    """An empty error body yields the status line."""
    client = make_client(lambda request: httpx.Response(404))

    with pytest.raises(ApiError) as exc_info:
        client.request('/media/99')

    assert str(exc_info.value) == '404 Not Found'


def test_no_retry_on_server_error(make_client):
    """Exactly one request is made even on 5xx."""
    call_count = 0

    def handler(request):
        nonlocal call_count
        call_count += 1
        return httpx.Response(500, json={'detail': 'boom'})

    client = make_client(handler)

    with pytest.raises(ApiError):
        client.request('/media/')

    assert call_count == 1


def test_connection_error_is_wrapped(make_client):
    """Transport failures raise ApiConnectionError."""
    def handler(request):
        raise httpx.ConnectError("Connection refused")

    client = make_client(handler)

    with pytest.raises(ApiConnectionError) as exc_info:
        client.request('/users/me')

    assert 'Cannot connect' in str(exc_info.value)


def test_invalid_json_body_raises_payload_error(make_client):
    """A JSON content type with an invalid body is a PayloadError."""
    client = make_client(
        lambda request: httpx.Response(200, content=b'{not json', headers={'content-type': 'application/json'})
    )

    with pytest.raises(PayloadError):
        client.request('/users/me')


def test_upload_error_uses_raw_body_text(make_client):
    """Upload failures carry the raw body, not the JSON detail."""
    client = make_client(lambda request: httpx.Response(413, json={'detail': 'too big'}))

    with pytest.raises(ApiError) as exc_info:
        client.upload('/media/upload/image', files={'file': ('a.png', b'd', 'image/png')})

    assert str(exc_info.value).startswith('{')
    assert '"detail"' in str(exc_info.value)
    assert 'too big' in str(exc_info.value)
    assert exc_info.value.status_code == 413


def test_request_id_header_sent(make_client):
    """Every request carries an X-Request-ID header."""
    seen = {}

    def handler(request):
        seen['request_id'] = request.headers.get('x-request-id')
        return httpx.Response(200, json={})

    client = make_client(handler)
    client.request('/media/')

    assert seen['request_id'] == client.request_id


def test_close_session(make_client):
    """Test closing HTTP session."""
    client = make_client(lambda request: httpx.Response(200))
    client.close()
    assert client.session.is_closed
