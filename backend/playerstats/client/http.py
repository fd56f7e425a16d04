"""Thin ``requests`` client for the player stats HTTP API."""

import logging
from typing import Any, Dict, List, Optional

import requests

logger = logging.getLogger(__name__)


class StatsClientError(Exception):
    """Any failed call: network trouble (status is None) or a non-2xx answer."""

    def __init__(self, message: str, status: Optional[int] = None, code: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.status = status
        self.code = code


class StatsClient:

    def __init__(self, base_url: str, token: Optional[str] = None, timeout: float = 10,
                 session: Optional[requests.Session] = None):
        self.base_url = base_url.rstrip('/')
        self.token = token
        self.timeout = timeout
        self.session = session or requests.Session()

    def _request(self, method: str, path: str, auth: bool = False, **kwargs) -> Dict[str, Any]:
        headers = kwargs.pop('headers', {}) or {}
        if auth:
            if not self.token:
                raise StatsClientError('Not logged in', status=401, code='Unauthenticated')
            headers['Authorization'] = f'Bearer {self.token}'
        url = f'{self.base_url}{path}'
        try:
            response = self.session.request(method, url, headers=headers, timeout=self.timeout, **kwargs)
        except requests.exceptions.RequestException as e:
            logger.warning('%s %s failed: %s', method, path, e)
            raise StatsClientError(f'Could not reach server: {e}') from e

        try:
            body = response.json()
        except ValueError:
            body = {}
        if not 200 <= response.status_code < 300:
            message = body.get('error') if isinstance(body, dict) else None
            code = body.get('code') if isinstance(body, dict) else None
            logger.info('%s %s -> %s %s', method, path, response.status_code, code)
            raise StatsClientError(message or f'HTTP {response.status_code}', status=response.status_code, code=code)
        return body

    def register(self, name: str, secret: str, email: Optional[str] = None) -> Dict[str, Any]:
        payload = {'name': name, 'secret': secret}
        if email:
            payload['email'] = email
        body = self._request('POST', '/accounts', json=payload)
        self.token = body['token']
        return body['player']

    def login(self, identifier: str, secret: str) -> Dict[str, Any]:
        key = 'email' if '@' in identifier else 'name'
        body = self._request('POST', '/sessions', json={key: identifier, 'secret': secret})
        self.token = body['token']
        return body['player']

    def me(self) -> Dict[str, Any]:
        return self._request('GET', '/me', auth=True)['player']

    def report_outcome(self, player_id: str, result: str) -> Dict[str, Any]:
        body = self._request('POST', f'/players/{player_id}/stats', auth=True, json={'result': result})
        return body['player']

    def leaderboard(self, limit: Optional[int] = None) -> List[Dict[str, Any]]:
        params = {'limit': limit} if limit is not None else None
        return self._request('GET', '/leaderboard', params=params)['entries']
